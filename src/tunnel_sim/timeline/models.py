"""Value types carried by trajectory curves."""

from __future__ import annotations

from dataclasses import dataclass

from tunnel_sim.timeline.curve import Field

LIFECYCLE_STATES = ("origin", "queued", "dequeueing", "transiting", "exiting", "done")
"""Lifecycle tags a vehicle moves through, in order."""

DIRECTIONS = ("east", "west")


@dataclass(frozen=True)
class XY:
    """A 2D pixel vector."""

    x: float
    y: float

    def __add__(self, other: XY) -> XY:
        return XY(self.x + other.x, self.y + other.y)

    def __sub__(self, other: XY) -> XY:
        return XY(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> XY:
        return XY(self.x * k, self.y * k)


XY_FIELD: Field[XY] = Field(add=XY.__add__, sub=XY.__sub__, mul=XY.__mul__)


@dataclass(frozen=True)
class VisualState:
    """Where a vehicle is and how it should be drawn.

    Only ``x``, ``y`` and ``opacity`` interpolate.  ``state`` and
    ``direction`` are carried from the earlier waypoint of a span.
    """

    x: float
    y: float
    state: str
    """One of :data:`LIFECYCLE_STATES`."""

    opacity: float
    """0.0 (invisible) to 1.0 (fully drawn)."""

    direction: str | None = None
    """``'east'`` / ``'west'`` for vehicles that switch tunnels, else ``None``."""

    @property
    def xy(self) -> XY:
        return XY(self.x, self.y)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "state": self.state,
            "opacity": self.opacity,
            "direction": self.direction,
        }


def _add(l: VisualState, r: VisualState) -> VisualState:
    return VisualState(l.x + r.x, l.y + r.y, l.state, l.opacity + r.opacity, l.direction)


def _sub(l: VisualState, r: VisualState) -> VisualState:
    return VisualState(l.x - r.x, l.y - r.y, l.state, l.opacity - r.opacity, l.direction)


def _mul(l: VisualState, k: float) -> VisualState:
    return VisualState(l.x * k, l.y * k, l.state, l.opacity * k, l.direction)


STATE_FIELD: Field[VisualState] = Field(add=_add, sub=_sub, mul=_mul)


@dataclass(frozen=True)
class PartialState:
    """A :class:`VisualState` update where any field may be left unset.

    Trajectory code emits these so a waypoint can say "opacity becomes 1"
    without restating the position; :func:`fill_forward` completes them.
    """

    x: float | None = None
    y: float | None = None
    state: str | None = None
    opacity: float | None = None
    direction: str | None = None

    @classmethod
    def of(cls, pos: XY, **kwargs) -> PartialState:
        """Shorthand for a partial state at *pos*."""
        return cls(x=pos.x, y=pos.y, **kwargs)
