import subprocess

from version_tracker.probe import CommandOutput


class FakeCommandRunner:
    """Stands in for subprocess: maps argument tuples to outputs or exceptions."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, args, cwd=None, timeout=None):
        args = tuple(args)
        self.calls.append((args, cwd, timeout))
        response = self.responses.get(args)
        if response is None:
            raise FileNotFoundError(2, "No such file or directory", args[0])
        if isinstance(response, BaseException):
            raise response
        return response


def ok(stdout="", stderr="", returncode=0):
    return CommandOutput(
        returncode=returncode,
        stdout=stdout.encode() if isinstance(stdout, str) else stdout,
        stderr=stderr.encode() if isinstance(stderr, str) else stderr,
    )


def timed_out(*args):
    return subprocess.TimeoutExpired(cmd=list(args), timeout=1)
