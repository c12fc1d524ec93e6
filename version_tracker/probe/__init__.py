"""Probing of executable versions."""

from version_tracker.probe.runner import (
    DEFAULT_PROBE_TIMEOUT,
    CandidateResult,
    CommandOutput,
    MissReason,
    ProbeResult,
    ProbeRunner,
    run_command,
)

__all__ = [
    "DEFAULT_PROBE_TIMEOUT",
    "CandidateResult",
    "CommandOutput",
    "MissReason",
    "ProbeResult",
    "ProbeRunner",
    "run_command",
]
