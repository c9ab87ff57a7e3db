"""Phase schedule of one tunnel direction."""

from __future__ import annotations

import bisect

from tunnel_sim.config.models import TunnelConfig
from tunnel_sim.timeline.curve import wrap_minute

PHASES = ("bikes-enter", "clearing", "sweep", "pace-car", "normal")


class PhaseBoundaryError(Exception):
    """Raised when phase start minutes are not strictly ascending within the period."""


class PhaseSchedule:
    """Maps a relative minute to the active phase.

    Phases run ``bikes-enter [0, pen_close)``, ``clearing [pen_close,
    sweep_start)``, ``sweep [sweep_start, pace_start)``, ``pace-car
    [pace_start, normal_start)`` and ``normal [normal_start, period)``.

    Raises:
        PhaseBoundaryError: If ``0 < pen_close < sweep_start < pace_start <
            normal_start < period`` does not hold.
    """

    def __init__(self, config: TunnelConfig) -> None:
        self.period = config.period
        self.starts = (
            0.0,
            config.pen_close_min,
            config.sweep_start_min,
            config.pace_start_min,
            config.normal_start_min,
        )
        bounds = self.starts + (self.period,)
        for name, lo, hi in zip(PHASES, bounds, bounds[1:]):
            if not lo < hi:
                raise PhaseBoundaryError(
                    f"{config.direction}: phase {name!r} is empty or inverted ({lo} -> {hi})"
                )

    def phase_at(self, rel_min: float) -> str:
        rel_min = wrap_minute(rel_min, self.period)
        return PHASES[bisect.bisect_right(self.starts, rel_min) - 1]

    def start_of(self, phase: str) -> float:
        return self.starts[PHASES.index(phase)]
