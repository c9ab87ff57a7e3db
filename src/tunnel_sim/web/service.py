"""TunnelService: wraps a :class:`Tunnels` instance for the Web API."""

from __future__ import annotations

from dataclasses import replace

from tunnel_sim.config.models import Layout
from tunnel_sim.tunnel.tunnels import Tunnels, VehicleSnapshot
from tunnel_sim.web.schemas import LayoutRequest, PhasesResponse, VehicleState


def _to_schema(snap: VehicleSnapshot) -> VehicleState:
    s = snap.state
    return VehicleState(
        vehicle_id=snap.vehicle_id,
        kind=snap.kind,
        direction=snap.direction,
        x=s.x,
        y=s.y,
        state=s.state,
        opacity=s.opacity,
    )


class TunnelService:
    """Read path and layout updates over one :class:`Tunnels` engine.

    Parameters
    ----------
    tunnels:
        Engine to serve.  Injected by tests; the app builds one from the
        default configuration on startup.
    """

    def __init__(self, tunnels: Tunnels) -> None:
        self._tunnels = tunnels

    @property
    def tunnels(self) -> Tunnels:
        return self._tunnels

    def phases(self, minute: float) -> PhasesResponse:
        phases = self._tunnels.phases_at(minute)
        return PhasesResponse(minute=minute, east=phases["east"], west=phases["west"])

    def vehicles(self, minute: float) -> list[VehicleState]:
        return [_to_schema(s) for s in self._tunnels.snapshot(minute)]

    def vehicle(self, vehicle_id: str, minute: float) -> VehicleState:
        """Return one vehicle's state.

        Raises
        ------
        KeyError
            If *vehicle_id* is unknown.
        """
        v = self._tunnels.vehicle(vehicle_id)
        state = self._tunnels.position_of(vehicle_id, minute)
        direction = v.direction if v.direction is not None else state.direction
        return _to_schema(VehicleSnapshot(vehicle_id, v.kind, direction, state))

    def update_layout(self, req: LayoutRequest) -> Layout:
        """Rebuild every trajectory for new pixel geometry.

        Raises
        ------
        ValueError
            If the resulting layout is invalid.
        """
        layout = self._tunnels.layout.resized(req.lane_width_px)
        if req.lane_height_px is not None:
            layout = replace(layout, lane_height_px=req.lane_height_px)
        self._tunnels.reconfigure(layout)
        return layout
