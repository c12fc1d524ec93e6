from version_tracker.cli import main

main()
