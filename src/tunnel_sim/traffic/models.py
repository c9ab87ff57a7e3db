"""Records produced by the queueing and merge planners."""

from __future__ import annotations

from dataclasses import dataclass

from tunnel_sim.timeline.models import XY


@dataclass(frozen=True)
class QueueRecord:
    """How a vehicle waits before entering the tunnel.

    Absent (``None`` on the vehicle) when the vehicle drives straight in.
    """

    offset: XY
    """Position relative to the queue anchor (pen corner or car-queue head)."""

    mins_before_dequeueing: float
    """Time spent standing in the queue after arrival."""

    mins_dequeueing: float
    """Time from leaving the queue slot to reaching the tunnel entrance."""

    @property
    def total_mins(self) -> float:
        return self.mins_before_dequeueing + self.mins_dequeueing


@dataclass(frozen=True)
class MergePlan:
    """An R-lane car folding into the L lane, in the car's local minutes."""

    entry_min: float
    """When the car enters the tunnel (after any wait at the entrance)."""

    merge_end_min: float
    """When the car is fully in the L lane."""

    from_y: float
    to_y: float

    @property
    def wait_mins(self) -> float:
        return self.entry_min
