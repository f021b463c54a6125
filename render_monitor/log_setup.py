"""Logging configuration for the render monitor.

Adds a ``TRACE`` level below DEBUG that carries every raw line Blender
prints. Console output goes to stderr; with ``--trace`` a per-run file
under ``TRACE_DIR`` receives everything, which is the only practical way
to inspect raw render output while the dashboard owns the screen.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from datetime import datetime

TRACE = 5
TRACE_DIR = "debug"
LOGGER_NAME = "render_monitor"

logging.addLevelName(TRACE, "TRACE")

_CONSOLE_FMT = "%(levelname)s %(name)s: %(message)s"
_FILE_FMT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s:%(funcName)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def console_level(*, debug: bool, trace: bool, verbose: bool) -> int:
    """Pick the console threshold; raw output only reaches it with trace+verbose."""
    if trace and verbose:
        return TRACE
    if debug or trace:
        return logging.DEBUG
    return logging.INFO


def _trace_file_handler() -> logging.FileHandler:
    os.makedirs(TRACE_DIR, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    handler = logging.FileHandler(os.path.join(TRACE_DIR, f"render-trace-{timestamp}.log"))
    handler.setLevel(TRACE)
    handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    *, debug: bool, trace: bool, verbose: bool
) -> logging.Logger:
    """Configure the ``render_monitor`` logger for one run.

    Safe to call repeatedly: previous handlers are closed and replaced.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()
    package_logger.setLevel(TRACE)

    console = logging.StreamHandler()
    console.setLevel(console_level(debug=debug, trace=trace, verbose=verbose))
    console.setFormatter(logging.Formatter(_CONSOLE_FMT))
    package_logger.addHandler(console)

    if trace:
        package_logger.addHandler(_trace_file_handler())

    return package_logger


def _console_handlers(package_logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in package_logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


class _HeldRecords(logging.handlers.MemoryHandler):
    """Buffers every record until closed, then hands them to the target."""

    def __init__(self, target: logging.Handler) -> None:
        super().__init__(capacity=0, target=target, flushOnClose=True)
        self.setLevel(target.level)

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return False


class ConsoleLogHold:
    """Keep console log output back while the dashboard owns the terminal.

    Records written to stderr during the alternate screen would land on
    top of the dashboard rows and vanish when the screen is restored.
    :meth:`start` swaps each console handler of the package logger for a
    buffer; :meth:`release` puts the handlers back and replays what was
    held. The trace file handler is never touched.
    """

    def __init__(self, logger_name: str = LOGGER_NAME) -> None:
        self._logger = logging.getLogger(logger_name)
        self._held: list[tuple[logging.Handler, _HeldRecords]] = []

    @property
    def active(self) -> bool:
        return bool(self._held)

    def start(self) -> None:
        if self._held:
            return
        for handler in _console_handlers(self._logger):
            buffer = _HeldRecords(handler)
            self._logger.removeHandler(handler)
            self._logger.addHandler(buffer)
            self._held.append((handler, buffer))

    def release(self) -> None:
        held, self._held = self._held, []
        for handler, buffer in held:
            self._logger.removeHandler(buffer)
            self._logger.addHandler(handler)
            buffer.close()
