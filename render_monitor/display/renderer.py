"""Consumer side of the pipeline: events in, dashboard and summary out."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from rich.console import Console

from render_monitor.channel import EventChannel
from render_monitor.config import RunnerOptions
from render_monitor.display.dashboard_state import DashboardState
from render_monitor.display.formatter import (
    PLACEHOLDER,
    format_duration,
    format_optional_duration,
    format_time,
)
from render_monitor.display.screen import Dashboard
from render_monitor.events import (
    DomainEvent,
    Failure,
    Finished,
    RenderedFrame,
    RunOutcome,
    Started,
)

logger = logging.getLogger(__name__)


class ProgressRenderer:
    """Accumulates render statistics and keeps the dashboard up to date.

    Owns the terminal for the whole run: the dashboard is opened before
    the first event is awaited and is always closed again, even when the
    render failed or drawing raised, before the plain-text summary is
    printed.
    """

    def __init__(
        self,
        options: RunnerOptions,
        dashboard: Dashboard,
        grace_period_seconds: float = 3.0,
        console: Console | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.state = DashboardState.from_options(options)
        self._dashboard = dashboard
        self._grace_period = grace_period_seconds
        self._console = console or Console()
        self._clock = clock

    def handle(self, event: DomainEvent) -> None:
        """Apply one event to the state and redraw the affected rows."""
        if isinstance(event, Started):
            if self.state.record_started(self._clock()):
                self._dashboard.draw_header(self.state)
                self._dashboard.draw_progress(self.state, self._clock())
        elif isinstance(event, RenderedFrame):
            if self.state.record_frame(event.render_time_ms):
                self._dashboard.draw_progress(self.state, self._clock())
        elif isinstance(event, Finished):
            if self.state.record_finished(self._clock()):
                self._dashboard.draw_footer(self.state)
        else:
            logger.warning("Ignoring unknown event %r", event)

    async def run(self, channel: EventChannel) -> RunOutcome:
        """Drain ``channel`` onto the dashboard, then print the summary.

        Returns:
            The outcome the producer closed the channel with.
        """
        try:
            self._dashboard.open()
            async for event in channel:
                self.handle(event)
            await asyncio.sleep(self._grace_period)
        finally:
            self._dashboard.close()

        outcome = channel.outcome
        if outcome is None:
            outcome = Failure("event stream ended without an outcome")
        for line in self.summary_lines(outcome):
            self._console.print(line, markup=False, highlight=False)
        return outcome

    def summary_lines(self, outcome: RunOutcome) -> list[str]:
        """Plain-text lines describing how the run went."""
        lines = []
        if isinstance(outcome, Failure):
            lines.append(f"Render failed: {outcome.reason}")
        elapsed = self.state.elapsed_ms(self._clock())
        elapsed_text = format_duration(elapsed) if elapsed is not None else PLACEHOLDER
        lines.append(f"Rendered {self.state.frames_rendered} frames in {elapsed_text}")
        lines.append(f"  Started:  {format_time(self.state.time_start)}")
        lines.append(f"  Finished: {format_time(self.state.time_end)}")
        lines.append(
            "  Average frame render time: "
            f"{format_optional_duration(self.state.average_render_time_ms)}"
        )
        return lines
