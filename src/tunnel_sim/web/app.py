"""FastAPI Web application exposing the tunnel engine's read path."""

from __future__ import annotations

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from tunnel_sim.config.defaults import HOLLAND_TUNNEL, layout_from_env
from tunnel_sim.timeline.trajectory import TrajectoryError
from tunnel_sim.traffic.queueing import QueueCapacityError
from tunnel_sim.tunnel.phases import PhaseBoundaryError
from tunnel_sim.tunnel.tunnels import Tunnels
from tunnel_sim.web.schemas import (
    HealthResponse,
    LayoutRequest,
    LayoutResponse,
    PhasesResponse,
    VehicleState,
    VehiclesResponse,
)
from tunnel_sim.web.service import TunnelService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

VERSION = "0.1.0"

_CONFIG_ERRORS = (ValueError, QueueCapacityError, PhaseBoundaryError, TrajectoryError)

_service: TunnelService | None = None


def _build_service() -> TunnelService:
    layout = layout_from_env(HOLLAND_TUNNEL.layout)
    return TunnelService(Tunnels(HOLLAND_TUNNEL.with_layout(layout)))


def get_service() -> TunnelService:
    global _service
    if _service is None:
        _service = _build_service()
    return _service


def set_service(service: TunnelService | None) -> None:
    """Swap the engine behind the API (tests inject their own)."""
    global _service
    _service = service


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_service()
    yield


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Tunnel Sim", version=VERSION, lifespan=lifespan)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/phases", response_model=PhasesResponse)
def phases(minute: float = 0.0) -> PhasesResponse:
    """Return both directions' phase at absolute *minute*."""
    return get_service().phases(minute)


@app.get("/api/vehicles", response_model=VehiclesResponse)
def list_vehicles(minute: float = 0.0) -> VehiclesResponse:
    """Return every vehicle's visual state at absolute *minute*."""
    return VehiclesResponse(minute=minute, vehicles=get_service().vehicles(minute))


@app.get("/api/vehicles/{vehicle_id}", response_model=VehicleState)
def get_vehicle(vehicle_id: str, minute: float = 0.0) -> VehicleState:
    try:
        return get_service().vehicle(vehicle_id, minute)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Vehicle {vehicle_id!r} not found") from exc


@app.put("/api/layout", response_model=LayoutResponse)
def update_layout(req: LayoutRequest) -> LayoutResponse:
    """Rebuild every trajectory for new pixel geometry."""
    svc = get_service()
    try:
        layout = svc.update_layout(req)
    except _CONFIG_ERRORS as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return LayoutResponse(
        lane_width_px=layout.lane_width_px,
        lane_height_px=layout.lane_height_px,
        vehicle_count=len(svc.tunnels.all_vehicles()),
    )
