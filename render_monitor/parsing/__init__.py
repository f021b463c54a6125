"""Render output parsing pipeline: line classifier → frame correlator."""

from render_monitor.parsing.models import (  # noqa: F401
    CurrentFrame,
    FrameRenderTime,
    NoSignal,
    ParsedLine,
    SavedFrame,
)

__all__ = ["CurrentFrame", "FrameRenderTime", "NoSignal", "ParsedLine", "SavedFrame"]
