"""Text formatting for durations, timestamps and the progress bar.

All rounding here is half-up on exact integer arithmetic so that, for
example, 4576ms always shows as ``4.6s`` regardless of float
representation.
"""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

PLACEHOLDER = "---"

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000

COMPLETE_STYLE = "on white"
INCOMPLETE_STYLE = "on black"


def round_half_up(numerator: int, denominator: int) -> int:
    """Divide two non-negative integers, rounding halves up."""
    return (2 * numerator + denominator) // (2 * denominator)


def format_duration(duration_ms: int) -> str:
    """Format a duration in milliseconds for humans.

    - over an hour: ``"5h 56m 29s"`` (whole seconds, hours never roll into days)
    - over a minute: ``"4m 23.7s"``
    - otherwise: ``"4.5s"``
    """
    if duration_ms > _MS_PER_HOUR:
        total_seconds = round_half_up(duration_ms, 1000)
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours}h {minutes}m {seconds}s"
    tenths = round_half_up(duration_ms, 100)
    if duration_ms > _MS_PER_MINUTE:
        minutes, tenths = divmod(tenths, 600)
        return f"{minutes}m {tenths // 10}.{tenths % 10}s"
    return f"{tenths // 10}.{tenths % 10}s"


def format_optional_duration(duration_ms: int | None) -> str:
    if duration_ms is None:
        return PLACEHOLDER
    return format_duration(duration_ms)


def format_time(moment: datetime | None) -> str:
    """Format a timestamp as ``"Oct 7, 3:04pm"``, or the placeholder if unset."""
    if moment is None:
        return PLACEHOLDER
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{moment:%b} {moment.day}, {hour}:{moment:%M}{meridiem}"


def progress_bar(frames_rendered: int, frames_to_render: int, width: int = 30) -> Text:
    """Build the fixed-width progress bar with its percentage label.

    Completed cells are drawn with a white background, the remainder
    with a black one, e.g. ``"[ ██████            ] (33%)"``.
    """
    filled = min(width, round_half_up(width * frames_rendered, frames_to_render))
    percent = round_half_up(100 * frames_rendered, frames_to_render)
    return Text.assemble(
        "[ ",
        (" " * filled, COMPLETE_STYLE),
        (" " * (width - filled), INCOMPLETE_STYLE),
        f" ] ({percent}%)",
    )
