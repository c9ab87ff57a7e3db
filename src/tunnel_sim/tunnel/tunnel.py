"""One tunnel direction: configuration, lanes and vehicle population.

The tunnel is the only place that mutates state, and only at construction and
in :meth:`Tunnel.reconfigure`.  Every curve is built eagerly so that invalid
configurations fail immediately instead of on the first frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tunnel_sim.config.models import Layout, TunnelConfig
from tunnel_sim.timeline.curve import Curve, wrap_minute
from tunnel_sim.timeline.models import XY, VisualState
from tunnel_sim.timeline.trajectory import fill_forward
from tunnel_sim.traffic.merge import LaneMerge
from tunnel_sim.traffic.models import QueueRecord
from tunnel_sim.traffic.queueing import BikePenQueue, CarReleaseQueue, check_capacity
from tunnel_sim.traffic.splitter import CONTINUATION_SUFFIX, CycleSplitter
from tunnel_sim.tunnel.phases import PhaseSchedule
from tunnel_sim.vehicles.lane import Lane, car_queue_head, make_lanes, pen_anchor
from tunnel_sim.vehicles.paths import bike_points, car_points
from tunnel_sim.vehicles.vehicle import RawPoints, Vehicle, fixed_source

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunnelState:
    """Everything built from one layout.  Replaced as a whole, never patched."""

    layout: Layout
    lanes: dict[str, Lane]
    bike_queue: BikePenQueue
    bike_queue_curve: Curve[float]
    vehicles: dict[str, Vehicle]


class Tunnel:
    """One direction of the tunnel.

    Args:
        config: Schedule, speeds and rates for this direction.
        layout: Pixel geometry.

    Raises:
        PhaseBoundaryError: If the phase minutes are out of order.
        QueueCapacityError: If either queue cannot drain within one period.
        TrajectoryError: If any vehicle's waypoints are invalid.
    """

    def __init__(self, config: TunnelConfig, layout: Layout | None = None) -> None:
        self.config = config
        self.phases = PhaseSchedule(config)
        check_capacity(
            "bike",
            config.bikes_released_per_min,
            config.pen_close_min,
            config.bikes_per_min,
            config.period,
        )
        check_capacity(
            "car",
            config.cars_released_per_min,
            config.period - config.pace_start_min,
            config.cars_per_min,
            config.period,
        )
        self._splitter = CycleSplitter(config.period)
        self._state = self._populate(layout or Layout())

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._state.vehicles

    def __repr__(self) -> str:
        return f"Tunnel({self.config.direction!r}, vehicles={len(self._state.vehicles)})"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def direction(self) -> str:
        return self.config.direction

    @property
    def offset(self) -> float:
        return self.config.offset_min

    @property
    def layout(self) -> Layout:
        return self._state.layout

    @property
    def lanes(self) -> dict[str, Lane]:
        return self._state.lanes

    @property
    def bike_queue(self) -> BikePenQueue:
        return self._state.bike_queue

    def relative_minute(self, abs_min: float) -> float:
        """Minutes since this direction's pen last opened, in ``[0, period)``.

        *abs_min* is reduced into the period before the offset is applied, so
        ``abs_min`` and ``abs_min + period`` map to the same minute whenever
        that sum is exact in floating point.
        """
        period = self.config.period
        return wrap_minute(wrap_minute(abs_min, period) - self.config.offset_min, period)

    def phase_at(self, rel_min: float) -> str:
        return self.phases.phase_at(rel_min)

    def all_vehicles(self) -> tuple[str, ...]:
        return tuple(self._state.vehicles)

    def vehicle(self, vehicle_id: str) -> Vehicle:
        try:
            return self._state.vehicles[vehicle_id]
        except KeyError:
            raise KeyError(f"Unknown vehicle {vehicle_id!r} in {self.direction}bound tunnel") from None

    def position_of(self, vehicle_id: str, abs_min: float) -> VisualState:
        """Visual state of *vehicle_id* at absolute clock minute *abs_min*.

        Raises:
            KeyError: If *vehicle_id* is not part of this tunnel.
        """
        return self.vehicle(vehicle_id).at(self.relative_minute(abs_min))

    def bike_queue_length_at(self, rel_min: float) -> float:
        """Pen occupancy at relative minute *rel_min*."""
        return self._state.bike_queue_curve.at(rel_min)

    def reconfigure(self, layout: Layout) -> None:
        """Rebuild every vehicle for new pixel geometry.

        The new state is published only once it is complete; if building it
        raises, the tunnel keeps serving the previous layout.
        """
        self._state = self._populate(layout)
        _logger.info("Reconfigured %sbound tunnel: lane width %.0f px", self.direction, layout.lane_width_px)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _populate(self, layout: Layout) -> TunnelState:
        cfg = self.config
        d, period = cfg.d, cfg.period
        tag = cfg.direction[0]
        lanes = make_lanes(cfg, layout)
        left, right = lanes["L"], lanes["R"]
        vehicles: dict[str, Vehicle] = {}
        splits = 0

        # Bicycles
        n_bikes = cfg.n_bikes
        bike_arrivals = [period * i / n_bikes for i in range(n_bikes)]
        pen_queue = BikePenQueue(
            bike_arrivals,
            cfg.bikes_released_per_min,
            cfg.pen_close_min,
            period,
            layout.bikes_per_row,
            XY(layout.bike_spacing_x_px, layout.bike_spacing_y_px),
            d,
        )
        pen = pen_anchor(cfg, layout, right)
        for i, (spawn, record) in enumerate(zip(bike_arrivals, pen_queue.records)):
            raw = bike_points(cfg, layout, right, pen, record)
            splits += self._add(vehicles, f"bike-{tag}-{i}", "bike", spawn, raw, "R", i, record)

        # Cars: R lane on the interval, L lane offset by half an interval
        n_cars = cfg.n_cars
        r_spawns = [period * i / n_cars for i in range(n_cars)]
        l_spawns = [period * (i + 0.5) / n_cars for i in range(n_cars)]
        head = car_queue_head(cfg, layout, right)
        car_queue = CarReleaseQueue(
            r_spawns,
            cfg.pace_start_min,
            cfg.cars_released_per_min,
            layout.queued_car_width_px,
            d,
            period,
        )
        # L-lane cars never wait, so their entry equals their spawn.
        merge = LaneMerge(l_spawns, l_spawns, period, right.y, left.y, cfg.merge_mins)
        for i, (spawn, record) in enumerate(zip(r_spawns, car_queue.records)):
            plan = None
            if record is None and self.phases.phase_at(spawn) == "pace-car":
                plan = merge.plan(spawn)
            raw = car_points(cfg, layout, right, head, record, plan)
            splits += self._add(vehicles, f"car-{tag}-R-{i}", "car", spawn, raw, "R", i, record)
        for i, spawn in enumerate(l_spawns):
            raw = car_points(cfg, layout, left, head)
            splits += self._add(vehicles, f"car-{tag}-L-{i}", "car", spawn, raw, "L", i, None)

        for v in vehicles.values():
            v.rebuild()

        _logger.info(
            "Built %sbound tunnel: %d bikes (%d queued), %d cars (%d queued), %d split",
            cfg.direction,
            n_bikes,
            pen_queue.n_queued,
            2 * n_cars,
            car_queue.n_queued,
            splits,
        )
        return TunnelState(layout, lanes, pen_queue, pen_queue.length_curve(), vehicles)

    def _add(
        self,
        vehicles: dict[str, Vehicle],
        vehicle_id: str,
        kind: str,
        spawn: float,
        raw: RawPoints,
        lane_id: str,
        index: int,
        queue: QueueRecord | None,
    ) -> int:
        """Register one vehicle (two if it has to be split).  Returns the number of splits."""
        filled = fill_forward(raw, vehicle_id)
        result = self._splitter.split(filled, spawn, vehicle_id)
        common = dict(
            kind=kind,
            period=self.config.period,
            lane_id=lane_id,
            index=index,
            direction=self.config.direction,
        )
        vehicles[vehicle_id] = Vehicle(
            vehicle_id, spawn_min=spawn, source=fixed_source(result.stub), queue=queue, **common
        )
        if not result.was_split:
            return 0
        cont_id = vehicle_id + CONTINUATION_SUFFIX
        vehicles[cont_id] = Vehicle(
            cont_id,
            spawn_min=result.continuation_spawn,
            source=fixed_source(result.continuation),
            **common,
        )
        return 1
