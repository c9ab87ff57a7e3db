"""Both tunnel directions plus the escort vehicles shared between them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tunnel_sim.config.defaults import HOLLAND_TUNNEL
from tunnel_sim.config.models import Layout, TunnelsConfig
from tunnel_sim.timeline.models import VisualState
from tunnel_sim.tunnel.tunnel import Tunnel
from tunnel_sim.vehicles.escort import escort_points
from tunnel_sim.vehicles.vehicle import Vehicle, fixed_source

_logger = logging.getLogger(__name__)

ESCORT_IDS = ("sweep", "pace")


@dataclass(frozen=True)
class VehicleSnapshot:
    """One vehicle's state at a given minute."""

    vehicle_id: str
    kind: str
    direction: str | None
    """Tunnel the vehicle belongs to; escorts report the direction they are serving."""

    state: VisualState


@dataclass(frozen=True)
class _Pair:
    config: TunnelsConfig
    eastbound: Tunnel
    westbound: Tunnel
    escorts: dict[str, Vehicle]


class Tunnels:
    """Eastbound and westbound tunnels with the sweep and pace vehicles.

    Both directions and the escorts are swapped together on
    :meth:`reconfigure`, so a reader never sees one direction on the old
    layout and the other on the new one.

    Args:
        config: Both directions' configuration, escorts and layout.
    """

    def __init__(self, config: TunnelsConfig = HOLLAND_TUNNEL) -> None:
        self._pair = _build_pair(config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def config(self) -> TunnelsConfig:
        return self._pair.config

    @property
    def layout(self) -> Layout:
        return self._pair.config.layout

    @property
    def eastbound(self) -> Tunnel:
        return self._pair.eastbound

    @property
    def westbound(self) -> Tunnel:
        return self._pair.westbound

    @property
    def tunnels(self) -> tuple[Tunnel, Tunnel]:
        pair = self._pair
        return (pair.eastbound, pair.westbound)

    def all_vehicles(self) -> tuple[str, ...]:
        pair = self._pair
        return pair.eastbound.all_vehicles() + pair.westbound.all_vehicles() + tuple(pair.escorts)

    def vehicle(self, vehicle_id: str) -> Vehicle:
        pair = self._pair
        if vehicle_id in pair.escorts:
            return pair.escorts[vehicle_id]
        return _owner(pair, vehicle_id).vehicle(vehicle_id)

    def position_of(self, vehicle_id: str, abs_min: float) -> VisualState:
        """Visual state of any vehicle at absolute clock minute *abs_min*.

        Raises:
            KeyError: If *vehicle_id* is unknown.
        """
        pair = self._pair
        if vehicle_id in pair.escorts:
            return pair.escorts[vehicle_id].at(abs_min)
        return _owner(pair, vehicle_id).position_of(vehicle_id, abs_min)

    def phases_at(self, abs_min: float) -> dict[str, str]:
        return {
            t.direction: t.phase_at(t.relative_minute(abs_min)) for t in self.tunnels
        }

    def snapshot(self, abs_min: float) -> list[VehicleSnapshot]:
        """Every vehicle's state at *abs_min*, tunnels first, then escorts."""
        pair = self._pair
        out: list[VehicleSnapshot] = []
        for t in (pair.eastbound, pair.westbound):
            rel = t.relative_minute(abs_min)
            for vid in t.all_vehicles():
                v = t.vehicle(vid)
                out.append(VehicleSnapshot(vid, v.kind, t.direction, v.at(rel)))
        for vid, v in pair.escorts.items():
            state = v.at(abs_min)
            out.append(VehicleSnapshot(vid, v.kind, state.direction, state))
        return out

    def reconfigure(self, layout: Layout) -> None:
        """Apply new pixel geometry to both directions and the escorts.

        Raises:
            ValueError: If *layout* is invalid.  The previous pair stays live.
        """
        self._pair = _build_pair(self._pair.config.with_layout(layout))
        _logger.info("Reconfigured tunnels: lane width %.0f px", layout.lane_width_px)


# ----- Private helpers -----


def _build_pair(config: TunnelsConfig) -> _Pair:
    east = Tunnel(config.eastbound, config.layout)
    west = Tunnel(config.westbound, config.layout)
    return _Pair(config, east, west, _build_escorts(config, east, west))


def _owner(pair: _Pair, vehicle_id: str) -> Tunnel:
    for t in (pair.eastbound, pair.westbound):
        if vehicle_id in t:
            return t
    raise KeyError(f"Unknown vehicle {vehicle_id!r}")


def _build_escorts(config: TunnelsConfig, eastbound: Tunnel, westbound: Tunnel) -> dict[str, Vehicle]:
    east, west = config.eastbound, config.westbound
    east_r, west_r = eastbound.lanes["R"], westbound.lanes["R"]
    starts = {"sweep": east.sweep_start_min, "pace": east.pace_start_min}
    escorts: dict[str, Vehicle] = {}
    for vid in ESCORT_IDS:
        cfg = getattr(config, vid)
        raw = escort_points(cfg, starts[vid], east, west, east_r, west_r)
        v = Vehicle(vid, vid, 0.0, east.period, fixed_source(raw), lane_id="R")
        v.rebuild()
        escorts[vid] = v
    _logger.info("Built escorts: %s", ", ".join(escorts))
    return escorts
