"""ANSI escape handling for captured process output."""

from __future__ import annotations

import re

# ESC '[' or the 8-bit CSI, parameter bytes, intermediate bytes, one final byte
ANSI_CSI_PATTERN = re.compile(r"(?:\x1b\[|\x9b)[0-?]*[ -/]*[@-~]")


def strip_ansi(text: str) -> str:
    """Remove every CSI escape sequence (colors, cursor moves) from text."""
    return ANSI_CSI_PATTERN.sub("", text)
