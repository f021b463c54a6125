"""Fixed-layout dashboard drawn on the terminal's alternate screen.

Layout (1-based rows)::

    1   Started at <time>
    2   Rendering frames <start> through <end>
    4   [ <progress bar> ] (NN%)
    6   Rendered N frames, M remaining
    7   Total time elapsed: <duration>
    8   Average frame render time: <duration>
    10  Finished at <time>

Row 9 stays empty; it is where the hidden cursor rests between redraws.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from rich.console import Console
from rich.live import Live
from rich.text import Text

from render_monitor.display.dashboard_state import DashboardState
from render_monitor.display.formatter import (
    format_optional_duration,
    format_time,
    progress_bar,
)
from render_monitor.log_setup import ConsoleLogHold

HEADER_ROW = 1
RANGE_ROW = 2
PROGRESS_ROW = 4
COUNTS_ROW = 6
ELAPSED_ROW = 7
AVERAGE_ROW = 8
FOOTER_ROW = 10


class Dashboard(Protocol):
    """Drawing surface the progress renderer talks to."""

    def open(self) -> None: ...

    def draw_header(self, state: DashboardState) -> None: ...

    def draw_progress(self, state: DashboardState, now: datetime) -> None: ...

    def draw_footer(self, state: DashboardState) -> None: ...

    def close(self) -> None: ...


class DashboardScreen:
    """Rich ``Live`` dashboard occupying the alternate screen.

    Each ``draw_*`` call replaces whole rows and redraws immediately.
    :meth:`open` switches to the alternate screen and hides the cursor;
    :meth:`close` restores both and is safe to call more than once.
    Console log records emitted in between are held back and printed
    once the normal screen is back.
    """

    def __init__(self, console: Console | None = None, bar_width: int = 30) -> None:
        self.console = console or Console()
        self._bar_width = bar_width
        self._rows: dict[int, Text] = {}
        self._live: Live | None = None
        self._log_hold = ConsoleLogHold()

    @property
    def is_open(self) -> bool:
        return self._live is not None

    def open(self) -> None:
        if self._live is not None:
            return
        self._live = Live(
            self.render(),
            console=self.console,
            screen=True,
            auto_refresh=False,
        )
        self._log_hold.start()
        self._live.start()

    def close(self) -> None:
        if self._live is None:
            return
        live, self._live = self._live, None
        try:
            live.stop()
        finally:
            self._log_hold.release()

    def __enter__(self) -> DashboardScreen:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def row(self, number: int) -> str:
        """Plain text currently shown on a 1-based row."""
        text = self._rows.get(number)
        return text.plain if text is not None else ""

    def render(self) -> Text:
        """Compose every row, top to bottom, into one renderable."""
        lines = [self._rows.get(n, Text()) for n in range(1, FOOTER_ROW + 1)]
        return Text("\n").join(lines)

    def _set_row(self, number: int, content: Text | str) -> None:
        self._rows[number] = content if isinstance(content, Text) else Text(content)

    def _refresh(self) -> None:
        if self._live is not None:
            self._live.update(self.render(), refresh=True)

    def draw_header(self, state: DashboardState) -> None:
        self._set_row(HEADER_ROW, f"Started at {format_time(state.time_start)}")
        self._set_row(
            RANGE_ROW,
            f"Rendering frames {state.frame_start} through {state.frame_end}",
        )
        self._refresh()

    def draw_progress(self, state: DashboardState, now: datetime) -> None:
        self._set_row(
            PROGRESS_ROW,
            progress_bar(state.frames_rendered, state.frames_to_render, self._bar_width),
        )
        self._set_row(
            COUNTS_ROW,
            f"Rendered {state.frames_rendered} frames, {state.frames_remaining} remaining",
        )
        self._set_row(
            ELAPSED_ROW,
            f"Total time elapsed: {format_optional_duration(state.elapsed_ms(now))}",
        )
        self._set_row(
            AVERAGE_ROW,
            "Average frame render time: "
            f"{format_optional_duration(state.average_render_time_ms)}",
        )
        self._refresh()

    def draw_footer(self, state: DashboardState) -> None:
        self._set_row(FOOTER_ROW, f"Finished at {format_time(state.time_end)}")
        self._refresh()
