"""Shared data types for the render output parsing pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class CurrentFrame:
    """Progress line naming the frame Blender is currently working on."""

    frame_number: int


@dataclass(frozen=True)
class SavedFrame:
    """A frame's image has been written to disk."""

    frame_number: int


@dataclass(frozen=True)
class FrameRenderTime:
    """Render duration reported for the most recently saved frame."""

    duration_ms: int


@dataclass(frozen=True)
class NoSignal:
    """Line carries nothing the monitor cares about."""


ParsedLine = Union[CurrentFrame, SavedFrame, FrameRenderTime, NoSignal]

# Shared instance, NoSignal carries no data
NO_SIGNAL = NoSignal()
