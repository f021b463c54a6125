"""Classify single lines of Blender's render output.

Each line maps to exactly one :data:`~render_monitor.parsing.models.ParsedLine`
variant. Rules are checked in priority order and the first match wins:

1. ``Fra:<n> Mem`` progress lines → :class:`CurrentFrame`
2. ``Saved: '.../<n>.png'`` lines → :class:`SavedFrame`
3. `` Time: MM:SS.CC`` timing lines → :class:`FrameRenderTime`
4. anything else → :class:`NoSignal`
"""

from __future__ import annotations

import re

from render_monitor.errors import MalformedOutput
from render_monitor.parsing.models import (
    NO_SIGNAL,
    CurrentFrame,
    FrameRenderTime,
    ParsedLine,
    SavedFrame,
)

# Largest value an unsigned 32-bit counter can hold
MAX_UINT = 2**32 - 1

_CURRENT_FRAME_RE = re.compile(r"^Fra:([0-9]+) Mem")
# Lazy prefix: the leftmost digit run directly before ".png" wins
_SAVED_FRAME_RE = re.compile(r"^Saved:.*?([0-9]+)\.png")
_RENDER_TIME_RE = re.compile(r"^\s?Time: ([0-9]{2}):([0-9]{2})\.([0-9]{2})")


def _parse_uint(digits: str, line: str) -> int:
    """Convert a matched digit run, enforcing the unsigned 32-bit range."""
    try:
        value = int(digits, 10)
    except ValueError:
        raise MalformedOutput(line, f"unparsable number {digits!r}") from None
    if value > MAX_UINT:
        raise MalformedOutput(line, f"number {digits} out of range")
    return value


def classify_line(line: str) -> ParsedLine:
    """Classify one line of render output.

    Args:
        line: Raw output line, with or without its trailing newline.

    Returns:
        The parsed line variant. Unrecognised lines yield ``NO_SIGNAL``.

    Raises:
        MalformedOutput: If a line matches structurally but its number
            cannot be represented.
    """
    match = _CURRENT_FRAME_RE.match(line)
    if match:
        return CurrentFrame(_parse_uint(match.group(1), line))

    match = _SAVED_FRAME_RE.match(line)
    if match:
        return SavedFrame(_parse_uint(match.group(1), line))

    match = _RENDER_TIME_RE.match(line)
    if match:
        minutes, seconds, hundredths = (int(g) for g in match.groups())
        return FrameRenderTime(minutes * 60_000 + seconds * 1000 + hundredths * 10)

    return NO_SIGNAL
