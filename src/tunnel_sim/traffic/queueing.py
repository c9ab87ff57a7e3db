"""Bicycle pen and car release-window queues.

Both planners are pure: they take arrival minutes (relative to the pen
opening) and return one :class:`~tunnel_sim.traffic.models.QueueRecord` (or
``None``) per arrival, in arrival order.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from tunnel_sim.timeline.curve import NUM, Curve, Waypoint
from tunnel_sim.timeline.models import XY
from tunnel_sim.traffic.models import QueueRecord


class QueueCapacityError(Exception):
    """Raised when a queue cannot drain within one period."""


def check_capacity(
    kind: str,
    release_rate: float,
    open_window: float,
    arrival_rate: float,
    period: float,
) -> None:
    """Raise :class:`QueueCapacityError` if *release_rate* cannot keep up.

    Everything that arrives in one period must be releasable during the
    *open_window* minutes the queue is allowed to drain.
    """
    released = release_rate * open_window
    arrived = arrival_rate * period
    if released < arrived:
        raise QueueCapacityError(
            f"{kind} queue cannot drain: releases {released:g} per period "
            f"({release_rate:g}/min over {open_window:g} min) but {arrived:g} arrive"
        )


def _check_arrivals(arrivals: Sequence[float], period: float) -> list[float]:
    arrivals = list(arrivals)
    for prev, cur in zip(arrivals, arrivals[1:]):
        if cur <= prev:
            raise ValueError("arrival minutes must be strictly ascending")
    if arrivals and not (0.0 <= arrivals[0] and arrivals[-1] < period):
        raise ValueError(f"arrival minutes must lie in [0, {period})")
    return arrivals


def _decay(release_rate: float, close_min: float):
    """Interp override: occupancy drains while the gate is open, else holds."""

    def interp(start: Waypoint[float], end: Waypoint[float], minute: float) -> float:
        open_mins = max(0.0, min(minute, close_min) - start.minute)
        return max(0.0, start.value - release_rate * open_mins)

    return interp


class BikePenQueue:
    """Queue state for the bicycle pen.

    The pen gate is open on ``[0, pen_close_min)``.  Bicycles arriving while it
    is closed wait for the next opening; bicycles arriving while it is open
    join whatever is still draining.

    Args:
        arrivals: Ascending arrival minutes in ``[0, period)``.
        release_rate: Bicycles released per minute while the gate is open.
        pen_close_min: Gate closing minute.
        period: Cycle length in minutes.
        columns: Pen grid columns.
        spacing: Pen slot spacing (x between columns, y between rows).
        d: Direction sign, +1 eastbound, -1 westbound.
    """

    def __init__(
        self,
        arrivals: Sequence[float],
        release_rate: float,
        pen_close_min: float,
        period: float,
        columns: int,
        spacing: XY,
        d: int,
    ) -> None:
        if release_rate <= 0:
            raise ValueError("release_rate must be > 0")
        if columns < 1:
            raise ValueError("columns must be >= 1")
        self.arrivals = _check_arrivals(arrivals, period)
        self.release_rate = release_rate
        self.pen_close_min = pen_close_min
        self.period = period
        self.columns = columns
        self.spacing = spacing
        self.d = d

        self.records: tuple[QueueRecord | None, ...] = ()
        self.running_lengths: tuple[float, ...] = ()
        """Queue length after each scanned open-window arrival."""

        self._occupancy: list[Waypoint[float]] = []
        self._plan()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def n_queued(self) -> int:
        return sum(1 for r in self.records if r is not None)

    def slot_offset(self, index: int) -> XY:
        """Pen slot for queue position *index* (0 = nearest the gate)."""
        row, col = divmod(index, self.columns)
        return XY(-self.d * col * self.spacing.x, self.d * row * self.spacing.y)

    def length_curve(self) -> Curve[float]:
        """Periodic pen occupancy over relative minutes."""
        return Curve(self._occupancy, NUM, self.period)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _plan(self) -> None:
        r, close, period = self.release_rate, self.pen_close_min, self.period
        in_window = [a for a in self.arrivals if a < close]
        next_cycle = [a for a in self.arrivals if a >= close]

        records: dict[float, QueueRecord] = {}
        for k, a in enumerate(next_cycle):
            records[a] = QueueRecord(
                offset=self.slot_offset(k),
                mins_before_dequeueing=period - a,
                mins_dequeueing=(k + 1) / r,
            )

        interp = _decay(r, close)
        occupancy: dict[float, float] = {0.0: float(len(next_cycle))}

        running = float(len(next_cycle))
        lengths: list[float] = []
        prev = self.arrivals[-1] - period if self.arrivals else 0.0
        for a in in_window:
            running -= (a - prev) * r
            running += 1
            prev = a
            if running <= 0:
                # Drained: this and every later open-window bicycle rides in.
                lengths.append(running)
                break
            lengths.append(running)
            index = max(0, math.ceil(running) - 1)
            records[a] = QueueRecord(
                offset=self.slot_offset(index),
                mins_before_dequeueing=0.0,
                mins_dequeueing=running / r,
            )
            occupancy[a] = running

        for k, a in enumerate(next_cycle):
            occupancy[a] = float(k + 1)

        self.records = tuple(records.get(a) for a in self.arrivals)
        self.running_lengths = tuple(lengths)
        self._occupancy = [
            Waypoint(m, occupancy[m], interp) for m in sorted(occupancy)
        ]


class CarReleaseQueue:
    """Queue for R-lane cars while the lane is reserved for bicycles.

    The R lane is closed to cars on ``[0, close_until_min)``; cars arriving
    then line up behind the queue head and are released in arrival order at
    *release_rate* once it reopens.

    Args:
        arrivals: Ascending R-lane arrival minutes in ``[0, period)``.
        close_until_min: Minute the lane reopens to cars.
        release_rate: Cars released per minute.
        car_width: Pixel spacing between queued cars.
        d: Direction sign.
        period: Cycle length in minutes.
    """

    def __init__(
        self,
        arrivals: Sequence[float],
        close_until_min: float,
        release_rate: float,
        car_width: float,
        d: int,
        period: float,
    ) -> None:
        if release_rate <= 0:
            raise ValueError("release_rate must be > 0")
        self.arrivals = _check_arrivals(arrivals, period)
        self.close_until_min = close_until_min
        self.release_rate = release_rate
        self.car_width = car_width
        self.d = d

        records: list[QueueRecord | None] = []
        order = 0
        for a in self.arrivals:
            if a >= close_until_min:
                records.append(None)
                continue
            records.append(
                QueueRecord(
                    offset=XY(-d * order * car_width, 0.0),
                    mins_before_dequeueing=max(0.0, close_until_min - a),
                    mins_dequeueing=(order + 1) / release_rate,
                )
            )
            order += 1
        self.records: tuple[QueueRecord | None, ...] = tuple(records)

    @property
    def n_queued(self) -> int:
        return sum(1 for r in self.records if r is not None)
