"""Version probing of external executables."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from version_tracker.models import Trackable
from version_tracker.utils.ansi import strip_ansi
from version_tracker.utils.logging import get_logger

logger = get_logger("probe.runner")

# Per-candidate timeout
DEFAULT_PROBE_TIMEOUT = 10.0  # seconds


@dataclass
class CommandOutput:
    """Raw result of one finished process."""

    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""


# (args, cwd, timeout) -> CommandOutput. Raises OSError when the process
# cannot be spawned and subprocess.TimeoutExpired when it runs too long.
CommandRunner = Callable[[Sequence[str], Optional[Path], Optional[float]], CommandOutput]
WorkingDirectoryProvider = Callable[[], Path]


def run_command(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> CommandOutput:
    """Run a command without a shell and capture both output streams."""
    completed = subprocess.run(
        list(args),
        cwd=str(cwd) if cwd is not None else None,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        timeout=timeout,
        check=False,
    )
    return CommandOutput(
        returncode=completed.returncode,
        stdout=completed.stdout or b"",
        stderr=completed.stderr or b"",
    )


class MissReason(str, Enum):
    """Why a candidate command did not produce a version."""

    SPAWN_FAILED = "spawn_failed"
    NONZERO_EXIT = "nonzero_exit"
    EMPTY_OUTPUT = "empty_output"
    TIMED_OUT = "timed_out"


@dataclass
class CandidateResult:
    """Outcome of running one candidate command."""

    command: tuple[str, ...]
    output: Optional[str] = None
    miss: Optional[MissReason] = None
    returncode: Optional[int] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.miss is None

    def to_dict(self) -> dict:
        return {
            "command": list(self.command),
            "ok": self.ok,
            "output": self.output,
            "miss": self.miss.value if self.miss else None,
            "returncode": self.returncode,
            "detail": self.detail,
        }


@dataclass
class ProbeResult:
    """Outcome of probing one trackable, with every attempt made."""

    name: str
    version: Optional[str] = None
    attempts: list[CandidateResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
        }


def decode_output(output: CommandOutput) -> str:
    """Combined stdout then stderr, ANSI-stripped and trimmed."""
    text = output.stdout.decode("utf-8", errors="replace")
    text += output.stderr.decode("utf-8", errors="replace")
    return strip_ansi(text).strip()


class ProbeRunner:
    """
    Runs a trackable's candidate commands until one reports a version.

    Candidates run one at a time in declared order. A candidate succeeds when
    it exits 0 with non-empty output; anything else (missing executable,
    non-zero exit, blank output, timeout) is a miss and the next candidate
    is tried.
    """

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_PROBE_TIMEOUT,
        cwd_provider: Optional[WorkingDirectoryProvider] = None,
        command_runner: CommandRunner = run_command,
    ) -> None:
        """
        Initialize the runner.

        Args:
            timeout: Seconds allowed per candidate, None to wait indefinitely
            cwd_provider: Supplies the working directory for spawned commands
            command_runner: Spawns a command and collects its output
        """
        self.timeout = timeout
        self.cwd_provider = cwd_provider or Path.cwd
        self.command_runner = command_runner

    def attempt(self, command: Sequence[str]) -> CandidateResult:
        """Run one candidate and classify the outcome."""
        command = tuple(command)
        try:
            output = self.command_runner(command, self.cwd_provider(), self.timeout)
        except subprocess.TimeoutExpired:
            return CandidateResult(
                command=command,
                miss=MissReason.TIMED_OUT,
                detail=f"no result after {self.timeout}s",
            )
        except (OSError, ValueError) as e:
            # ValueError: arguments the OS cannot accept, e.g. embedded NUL bytes
            return CandidateResult(
                command=command,
                miss=MissReason.SPAWN_FAILED,
                detail=str(e),
            )

        if output.returncode != 0:
            return CandidateResult(
                command=command,
                miss=MissReason.NONZERO_EXIT,
                returncode=output.returncode,
            )

        text = decode_output(output)
        if not text:
            return CandidateResult(
                command=command,
                miss=MissReason.EMPTY_OUTPUT,
                returncode=output.returncode,
            )

        return CandidateResult(command=command, output=text, returncode=0)

    def run(self, trackable: Trackable) -> ProbeResult:
        """Probe a trackable, keeping the record of every attempt."""
        result = ProbeResult(name=trackable.name)

        for command in trackable.commands:
            attempt = self.attempt(command)
            result.attempts.append(attempt)

            if attempt.ok:
                result.version = attempt.output
                logger.debug(
                    "probe_succeeded",
                    trackable=trackable.name,
                    command=list(command),
                    version=attempt.output,
                )
                break

            logger.debug(
                "candidate_missed",
                trackable=trackable.name,
                command=list(command),
                reason=attempt.miss.value,
                returncode=attempt.returncode,
                detail=attempt.detail,
            )
        else:
            logger.info(
                "probe_missed",
                trackable=trackable.name,
                candidates=len(trackable.commands),
            )

        return result

    def probe(self, trackable: Trackable) -> Optional[str]:
        """Version string from the first successful candidate, or None."""
        return self.run(trackable).version
