"""Fatal error kinds raised while supervising a render job."""

from __future__ import annotations


class RenderMonitorError(Exception):
    """Base class for every fatal condition of a render run."""

    pass


class SpawnFailure(RenderMonitorError):
    """Raised when the render process cannot be started at all."""

    pass


class MalformedOutput(RenderMonitorError):
    """Raised when a recognised output line carries an unusable number."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Malformed render output ({reason}): {line.rstrip()!r}")
        self.line = line
        self.reason = reason


class CorrelationViolation(RenderMonitorError):
    """Raised when a frame timing arrives with no saved frame pending."""

    def __init__(self, duration_ms: int) -> None:
        super().__init__(
            f"Frame render time {duration_ms}ms reported before any saved frame"
        )
        self.duration_ms = duration_ms


class SubprocessFailure(RenderMonitorError):
    """Raised when the render process exits unsuccessfully.

    Exactly one of ``exit_code`` and ``signal`` is set.
    """

    def __init__(self, exit_code: int | None = None, signal: int | None = None) -> None:
        if signal is not None:
            message = f"Render process terminated by signal {signal}"
        else:
            message = f"Render process exited with non-zero status code: {exit_code}"
        super().__init__(message)
        self.exit_code = exit_code
        self.signal = signal
