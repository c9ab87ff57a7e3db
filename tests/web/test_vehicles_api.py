"""GET /api/phases, /api/vehicles and /api/vehicles/{id}."""

from __future__ import annotations

import pytest


class TestPhasesApi:
    def test_phases(self, client):
        resp = client.get("/api/phases", params={"minute": 45})
        assert resp.status_code == 200
        assert resp.json() == {"minute": 45.0, "east": "bikes-enter", "west": "normal"}

    def test_default_minute(self, client):
        resp = client.get("/api/phases")
        assert resp.json()["minute"] == 0.0

    def test_non_numeric_minute(self, client):
        resp = client.get("/api/phases", params={"minute": "soon"})
        assert resp.status_code == 422


class TestVehiclesApi:
    def test_lists_every_vehicle(self, client, engine):
        resp = client.get("/api/vehicles", params={"minute": 0})
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["vehicles"]) == len(engine.all_vehicles())

    def test_vehicle_fields(self, client):
        data = client.get("/api/vehicles", params={"minute": 50}).json()
        sweep = next(v for v in data["vehicles"] if v["vehicle_id"] == "sweep")
        assert sweep["kind"] == "sweep"
        assert sweep["direction"] == "east"
        assert sweep["state"] == "transiting"


class TestVehicleApi:
    def test_single_vehicle(self, client):
        resp = client.get("/api/vehicles/bike-e-0", params={"minute": 45})
        assert resp.status_code == 200
        data = resp.json()
        assert data["x"] == 0.0
        assert data["y"] == 45.0
        assert data["direction"] == "east"
        assert data["opacity"] == 1.0

    def test_escort_reports_current_direction(self, client):
        data = client.get("/api/vehicles/sweep", params={"minute": 20}).json()
        assert data["direction"] == "west"
        assert data["x"] == pytest.approx(800.0)

    def test_unknown_vehicle_404(self, client):
        resp = client.get("/api/vehicles/bike-x-99")
        assert resp.status_code == 404
