"""Time-keyed keyframe curves with optional wrap-around (periodic) lookup.

A :class:`Curve` stores strictly ascending :class:`Waypoint` objects and
answers ``at(minute)`` by interpolating over a :class:`Field`, i.e. any value
type supporting ``add``, ``sub`` and scalar ``mul``.
"""

from __future__ import annotations

import bisect
import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Interp = Callable[["Waypoint[Any]", "Waypoint[Any]", float], Any]
"""Interpolation override: ``(start, end, minute) -> value``."""


class InvalidCurve(Exception):
    """Raised when a curve is built from empty or unsorted waypoints."""


@dataclass(frozen=True)
class Field(Generic[T]):
    """The algebra a :class:`Curve` interpolates over."""

    add: Callable[[T, T], T]
    sub: Callable[[T, T], T]
    mul: Callable[[T, float], T]


NUM: Field[float] = Field(add=operator.add, sub=operator.sub, mul=operator.mul)


@dataclass(frozen=True)
class Waypoint(Generic[T]):
    """A ``(minute, value)`` control point.

    ``interp`` overrides the default linear blend for the span that *starts*
    at this waypoint.
    """

    minute: float
    value: T
    interp: Interp | None = None


def wrap_minute(minute: float, period: float) -> float:
    """Floored modulo of *minute* into ``[0, period)``.

    ``-1e-18 % 60`` evaluates to ``60.0`` in floating point; that case is folded
    back to ``0.0``.
    """
    wrapped = minute % period
    if wrapped >= period:
        return 0.0
    return wrapped


class Curve(Generic[T]):
    """Piecewise interpolation over strictly ascending waypoints.

    Args:
        points: Waypoints sorted strictly ascending by ``minute``.
        field: Value algebra used for the default linear interpolation.
        period: When set, lookups wrap modulo *period* and the span from the
            last waypoint to the first (shifted by ``+period``) is valid.

    Raises:
        InvalidCurve: If *points* is empty or not strictly ascending.
    """

    def __init__(
        self,
        points: Sequence[Waypoint[T]],
        field: Field[T],
        period: float | None = None,
    ) -> None:
        if not points:
            raise InvalidCurve("Curve must have at least one point")
        for prev, cur in zip(points, points[1:]):
            if cur.minute <= prev.minute:
                raise InvalidCurve(
                    "Curve points must be strictly ascending by minute. "
                    f"Found: {prev.minute} and {cur.minute}"
                )
        if period is not None and period <= 0:
            raise InvalidCurve(f"Curve period must be positive, got {period}")
        self.points: tuple[Waypoint[T], ...] = tuple(points)
        self.field = field
        self.period = period
        self._minutes = [p.minute for p in self.points]

    def __len__(self) -> int:
        return len(self.points)

    def __repr__(self) -> str:
        return f"Curve(n={len(self.points)}, period={self.period})"

    def interpolate(self, start: Waypoint[T], end: Waypoint[T], minute: float) -> T:
        """Blend from *start* toward *end* at *minute*."""
        span = end.minute - start.minute
        if span <= 0:
            raise InvalidCurve(
                f"End time must be greater than start time ({start.minute} -> {end.minute})"
            )
        if start.interp is not None:
            return start.interp(start, end, minute)
        ratio = (minute - start.minute) / span
        f = self.field
        return f.add(start.value, f.mul(f.sub(end.value, start.value), ratio))

    def at(self, minute: float) -> T:
        """Return the value at *minute*."""
        points, period = self.points, self.period
        if period is not None:
            minute = wrap_minute(minute, period)

        idx = bisect.bisect_left(self._minutes, minute)
        if idx < len(points) and points[idx].minute == minute:
            # Exact hit: stored value, verbatim.
            return points[idx].value

        if idx == len(points):
            last = points[-1]
            if period is not None and len(points) > 1:
                first = points[0]
                wrapped = Waypoint(first.minute + period, first.value, first.interp)
                return self.interpolate(last, wrapped, minute)
            return last.value

        if idx == 0:
            first = points[0]
            if period is not None and len(points) > 1:
                last = points[-1]
                wrapped = Waypoint(last.minute - period, last.value, last.interp)
                return self.interpolate(wrapped, first, minute)
            return first.value

        return self.interpolate(points[idx - 1], points[idx], minute)
