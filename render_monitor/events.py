"""Domain events exchanged between the render job and the dashboard,
plus the outcome value that ends every run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from render_monitor.errors import RenderMonitorError


@dataclass(frozen=True)
class Started:
    """The render process was spawned successfully."""


@dataclass(frozen=True)
class RenderedFrame:
    """One frame finished rendering and was saved."""

    frame_number: int
    render_time_ms: int


@dataclass(frozen=True)
class Finished:
    """The render process exited with status 0."""


DomainEvent = Union[Started, RenderedFrame, Finished]


@dataclass(frozen=True)
class Success:
    """The render job completed cleanly."""

    ok = True


@dataclass(frozen=True)
class Failure:
    """The render job stopped on a fatal condition."""

    reason: str
    error: RenderMonitorError | None = None

    ok = False


RunOutcome = Union[Success, Failure]
