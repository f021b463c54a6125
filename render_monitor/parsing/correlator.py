"""Pair "frame saved" lines with the timing line that follows them."""

from __future__ import annotations

import logging

from render_monitor.errors import CorrelationViolation
from render_monitor.events import RenderedFrame
from render_monitor.parsing.models import FrameRenderTime, ParsedLine, SavedFrame

logger = logging.getLogger(__name__)


class FrameCorrelator:
    """Two-state machine turning (SavedFrame, FrameRenderTime) pairs into events.

    The correlator is ``Idle`` while :attr:`pending_frame` is None and
    ``AwaitingTiming`` otherwise. A :class:`SavedFrame` always moves it to
    ``AwaitingTiming`` (replacing any earlier pending frame); a
    :class:`FrameRenderTime` completes the pair and returns it to ``Idle``.
    Every other line leaves the state untouched.

    Args:
        strict: When True (the default) a timing line with no pending
            frame raises :class:`CorrelationViolation`. When False the
            timing is logged and dropped.
    """

    def __init__(self, strict: bool = True) -> None:
        self._strict = strict
        self.pending_frame: int | None = None

    def feed(self, parsed: ParsedLine) -> RenderedFrame | None:
        """Advance the state machine by one parsed line.

        Returns:
            A :class:`RenderedFrame` when a pair completes, else None.

        Raises:
            CorrelationViolation: In strict mode, when a timing line
                arrives while idle.
        """
        if isinstance(parsed, SavedFrame):
            if self.pending_frame is not None:
                logger.debug(
                    "Frame %d saved while frame %d still awaited its timing",
                    parsed.frame_number, self.pending_frame,
                )
            self.pending_frame = parsed.frame_number
            return None

        if isinstance(parsed, FrameRenderTime):
            if self.pending_frame is None:
                if self._strict:
                    raise CorrelationViolation(parsed.duration_ms)
                logger.warning(
                    "Dropping render time %dms with no saved frame pending",
                    parsed.duration_ms,
                )
                return None
            event = RenderedFrame(
                frame_number=self.pending_frame, render_time_ms=parsed.duration_ms
            )
            self.pending_frame = None
            return event

        return None
