"""Record the executable versions behind each successful project build."""

__version__ = "1.0.0"
