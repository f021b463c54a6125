"""Statistics accumulated by the dashboard over one render run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from render_monitor.config import RunnerOptions
from render_monitor.display.formatter import round_half_up

logger = logging.getLogger(__name__)


class RenderPhase(Enum):
    """Where the dashboard is in the run lifecycle.

    Values:
        NOT_STARTED: No ``Started`` event seen yet.
        RUNNING: Started, frames may be arriving.
        FINISHED: The render process exited cleanly.
    """
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class DashboardState:
    """Frame counts, render durations and start/finish timestamps.

    Mutated only by the progress renderer. ``render_times`` is
    append-only and kept in completion order.
    """

    frame_start: int
    frame_end: int
    render_times: list[int] = field(default_factory=list)
    time_start: datetime | None = None
    time_end: datetime | None = None

    @classmethod
    def from_options(cls, options: RunnerOptions) -> DashboardState:
        return cls(frame_start=options.frame_start, frame_end=options.frame_end)

    @property
    def phase(self) -> RenderPhase:
        if self.time_end is not None:
            return RenderPhase.FINISHED
        if self.time_start is not None:
            return RenderPhase.RUNNING
        return RenderPhase.NOT_STARTED

    @property
    def frames_to_render(self) -> int:
        return self.frame_end - self.frame_start + 1

    @property
    def frames_rendered(self) -> int:
        return len(self.render_times)

    @property
    def frames_remaining(self) -> int:
        return self.frames_to_render - self.frames_rendered

    @property
    def percent_complete(self) -> float:
        return self.frames_rendered / self.frames_to_render

    @property
    def average_render_time_ms(self) -> int | None:
        """Mean frame render time rounded to whole ms, None before any frame."""
        if not self.render_times:
            return None
        return round_half_up(sum(self.render_times), len(self.render_times))

    def elapsed_ms(self, now: datetime | None = None) -> int | None:
        """Milliseconds since start, up to ``time_end`` once finished.

        Returns None while the run has not started.
        """
        if self.time_start is None:
            return None
        until = self.time_end or now or datetime.now()
        delta = until - self.time_start
        return max(0, delta // timedelta(milliseconds=1))

    def record_started(self, now: datetime) -> bool:
        if self.time_start is not None:
            logger.warning("Ignoring duplicate start event")
            return False
        self.time_start = now
        return True

    def record_frame(self, render_time_ms: int) -> bool:
        if self.frames_remaining <= 0:
            logger.warning(
                "Ignoring frame beyond the requested %d frames", self.frames_to_render
            )
            return False
        self.render_times.append(render_time_ms)
        return True

    def record_finished(self, now: datetime) -> bool:
        if self.time_start is None or self.time_end is not None:
            logger.warning("Ignoring finish event in phase %s", self.phase.value)
            return False
        self.time_end = now
        return True

