import sys
from pathlib import Path

import pytest

from helpers import FakeCommandRunner, ok, timed_out
from version_tracker.config import load_tracker_config
from version_tracker.models import Trackable
from version_tracker.probe import MissReason, ProbeRunner


def make_runner(responses, **kwargs):
    fake = FakeCommandRunner(responses)
    return ProbeRunner(command_runner=fake, cwd_provider=lambda: Path("/work"), **kwargs), fake


def test_single_candidate_success_is_trimmed():
    runner, _ = make_runner({("git", "--version"): ok("git version 2.34.1\n")})
    trackable = Trackable(name="git", commands=(("git", "--version"),))

    assert runner.probe(trackable) == "git version 2.34.1"


def test_falls_back_when_first_candidate_cannot_spawn():
    runner, fake = make_runner({("python", "--version"): ok("Python 3.11.4\n")})
    trackable = Trackable(
        name="python",
        commands=(("python3", "--version"), ("python", "--version")),
    )

    assert runner.probe(trackable) == "Python 3.11.4"
    assert [call[0] for call in fake.calls] == [
        ("python3", "--version"),
        ("python", "--version"),
    ]


def test_first_success_stops_evaluation():
    runner, fake = make_runner({
        ("node", "-v"): ok("v20.1.0"),
        ("nodejs", "-v"): ok("v18.0.0"),
    })
    trackable = Trackable(name="node", commands=(("node", "-v"), ("nodejs", "-v")))

    assert runner.probe(trackable) == "v20.1.0"
    assert len(fake.calls) == 1


@pytest.mark.parametrize(
    "response, reason",
    [
        (ok("oops", returncode=1), MissReason.NONZERO_EXIT),
        (ok("   \n"), MissReason.EMPTY_OUTPUT),
        (ok("\x1b[0m\n"), MissReason.EMPTY_OUTPUT),
        (timed_out("slow", "--version"), MissReason.TIMED_OUT),
        (PermissionError(13, "Permission denied"), MissReason.SPAWN_FAILED),
        (ValueError("embedded null byte"), MissReason.SPAWN_FAILED),
    ],
)
def test_misses_move_on_to_next_candidate(response, reason):
    runner, _ = make_runner({
        ("first", "--version"): response,
        ("second", "--version"): ok("second 1.0"),
    })
    trackable = Trackable(name="tool", commands=(("first", "--version"), ("second", "--version")))

    result = runner.run(trackable)

    assert result.version == "second 1.0"
    assert result.attempts[0].miss is reason
    assert result.attempts[1].ok


def test_all_candidates_missing_gives_none():
    runner, _ = make_runner({("yarn", "-v"): ok("", returncode=127)})
    trackable = Trackable(name="yarn", commands=(("yarn", "-v"), ("yarnpkg", "-v")))

    result = runner.run(trackable)

    assert result.version is None
    assert [a.miss for a in result.attempts] == [
        MissReason.NONZERO_EXIT,
        MissReason.SPAWN_FAILED,
    ]
    assert runner.probe(trackable) is None


def test_stdout_then_stderr_combined_and_stripped():
    runner, _ = make_runner({
        ("java", "-version"): ok(stdout="", stderr="\x1b[1mopenjdk 17.0.2\x1b[0m\n"),
        ("tool", "-V"): ok(stdout="tool 1\n", stderr="build abc\n"),
    })

    assert runner.probe(Trackable(name="java", commands=(("java", "-version"),))) == "openjdk 17.0.2"
    assert runner.probe(Trackable(name="tool", commands=(("tool", "-V"),))) == "tool 1\nbuild abc"


def test_passes_timeout_and_working_directory():
    runner, fake = make_runner({("git", "--version"): ok("git version 2.40.0")}, timeout=3.5)

    runner.probe(Trackable(name="git", commands=(("git", "--version"),)))

    assert fake.calls == [(("git", "--version"), Path("/work"), 3.5)]


def test_undecodable_output_is_replaced():
    runner, _ = make_runner({("tool",): ok(stdout=b"tool \xff 2.0\n")})

    assert runner.probe(Trackable(name="tool", commands=(("tool",),))) == "tool \ufffd 2.0"


def test_real_subprocess_fallback(tmp_path):
    runner = ProbeRunner(timeout=30, cwd_provider=lambda: tmp_path)
    trackable = Trackable(
        name="python",
        commands=(
            ("definitely-not-an-installed-executable-xyz", "--version"),
            (sys.executable, "-c", "import sys; sys.exit(3)"),
            (sys.executable, "-c", "print('\\x1b[32mpython ok\\x1b[0m')"),
        ),
    )

    result = runner.run(trackable)

    assert result.version == "python ok"
    assert [a.miss for a in result.attempts] == [
        MissReason.SPAWN_FAILED,
        MissReason.NONZERO_EXIT,
        None,
    ]


def test_unspawnable_arguments_fall_back_to_next_candidate(tmp_path):
    config = load_tracker_config([{
        "name": "py",
        "versionCommands": [
            ["py\u0000thon", "--version"],
            [sys.executable, "-c", "print('ok')"],
        ],
    }])
    runner = ProbeRunner(timeout=30, cwd_provider=lambda: tmp_path)

    result = runner.run(config.trackables[0])

    assert result.version == "ok"
    assert result.attempts[0].miss is MissReason.SPAWN_FAILED


def test_real_subprocess_timeout_is_a_miss(tmp_path):
    runner = ProbeRunner(timeout=0.5, cwd_provider=lambda: tmp_path)
    trackable = Trackable(
        name="sleeper",
        commands=((sys.executable, "-c", "import time; time.sleep(10)"),),
    )

    result = runner.run(trackable)

    assert result.version is None
    assert result.attempts[0].miss is MissReason.TIMED_OUT
