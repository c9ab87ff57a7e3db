"""R-to-L lane merging while the pace car holds the R lane."""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from tunnel_sim.timeline.curve import wrap_minute
from tunnel_sim.traffic.models import MergePlan


class LaneMerge:
    """Plans how an R-lane car slots in between two L-lane cars.

    Args:
        l_spawns: Ascending L-lane spawn minutes in ``[0, period)``.
        l_entries: Tunnel-entry minute of each L-lane car (same order).
        period: Cycle length in minutes.
        from_y: R lane y.
        to_y: L lane y.
        merge_mins: Time taken to change lanes once inside.
    """

    def __init__(
        self,
        l_spawns: Sequence[float],
        l_entries: Sequence[float],
        period: float,
        from_y: float,
        to_y: float,
        merge_mins: float,
    ) -> None:
        if len(l_spawns) != len(l_entries):
            raise ValueError("l_spawns and l_entries must have the same length")
        if not l_spawns:
            raise ValueError("LaneMerge needs at least one L-lane car")
        if merge_mins <= 0:
            raise ValueError("merge_mins must be > 0")
        self.l_spawns = list(l_spawns)
        self.l_entries = list(l_entries)
        self.period = period
        self.from_y = from_y
        self.to_y = to_y
        self.merge_mins = merge_mins

    def neighbours(self, spawn_min: float) -> tuple[float, float]:
        """Entry minutes of the L cars spawned just before and just after *spawn_min*.

        The results are unwrapped so that ``before <= after`` even across the
        period boundary.
        """
        spawn_min = wrap_minute(spawn_min, self.period)
        n = len(self.l_spawns)
        idx = bisect.bisect_right(self.l_spawns, spawn_min)
        before = self.l_entries[idx - 1] if idx > 0 else self.l_entries[-1] - self.period
        after = self.l_entries[idx] if idx < n else self.l_entries[0] + self.period
        return before, after

    def plan(self, spawn_min: float) -> MergePlan:
        """Return the merge plan for an R car spawned at *spawn_min*."""
        before, after = self.neighbours(spawn_min)
        centred = (before + after) / 2
        entry = max(0.0, centred - wrap_minute(spawn_min, self.period))
        return MergePlan(
            entry_min=entry,
            merge_end_min=entry + self.merge_mins,
            from_y=self.from_y,
            to_y=self.to_y,
        )
