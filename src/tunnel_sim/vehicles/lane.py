"""Lane geometry for one tunnel direction."""

from __future__ import annotations

from dataclasses import dataclass

from tunnel_sim.config.models import Layout, TunnelConfig
from tunnel_sim.timeline.models import XY

LANE_IDS = ("L", "R")


@dataclass(frozen=True)
class Lane:
    lane_id: str
    entrance: XY
    exit: XY

    @property
    def y(self) -> float:
        return self.entrance.y

    def midpoint(self) -> XY:
        return XY((self.entrance.x + self.exit.x) / 2, self.y)


def make_lanes(config: TunnelConfig, layout: Layout) -> dict[str, Lane]:
    """Return the ``L`` and ``R`` lanes of one direction.

    Eastbound traffic enters at ``x = 0``; westbound at ``x = lane_width_px``.
    The R lane is the outer one (below eastbound, above westbound).
    """
    d = config.d
    h = layout.lane_height_px
    start = 0.0 if d == 1 else layout.lane_width_px
    end = layout.lane_width_px if d == 1 else 0.0
    lanes = {}
    for lane_id, sign in (("L", -1), ("R", 1)):
        y = h * (1 + sign * d * 0.5)
        lanes[lane_id] = Lane(lane_id, XY(start, y), XY(end, y))
    return lanes


def pen_anchor(config: TunnelConfig, layout: Layout, r_lane: Lane) -> XY:
    """Top-left pen slot (queue position 0), beside the R-lane entrance."""
    d = config.d
    return XY(
        r_lane.entrance.x - d * layout.pen_offset_x_px,
        r_lane.y + d * layout.pen_offset_y_px,
    )


def car_queue_head(config: TunnelConfig, layout: Layout, r_lane: Lane) -> XY:
    """Where the first queued R-lane car waits."""
    return XY(r_lane.entrance.x - config.d * layout.car_queue_offset_px, r_lane.y)
