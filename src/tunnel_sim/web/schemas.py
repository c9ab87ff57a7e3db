"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class PhasesResponse(BaseModel):
    minute: float
    east: str
    west: str


class VehicleState(BaseModel):
    vehicle_id: str
    kind: str
    direction: str | None = None
    x: float
    y: float
    state: str
    opacity: float


class VehiclesResponse(BaseModel):
    minute: float
    vehicles: list[VehicleState]


class LayoutRequest(BaseModel):
    lane_width_px: float = Field(gt=0)
    lane_height_px: float | None = Field(default=None, gt=0)


class LayoutResponse(BaseModel):
    lane_width_px: float
    lane_height_px: float
    vehicle_count: int
