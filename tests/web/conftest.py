"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tunnel_sim.tunnel.tunnels import Tunnels
from tunnel_sim.web.app import app, set_service
from tunnel_sim.web.service import TunnelService


@pytest.fixture(scope="session")
def engine() -> Tunnels:
    """Default two-direction engine (built once; read-only tests only)."""
    return Tunnels()


@pytest.fixture
def client(engine):
    """FastAPI test client over the shared default engine."""
    set_service(TunnelService(engine))
    with TestClient(app) as c:
        yield c
    set_service(None)


@pytest.fixture
def fresh_client():
    """Test client over a private engine, for tests that reconfigure it."""
    set_service(TunnelService(Tunnels()))
    with TestClient(app) as c:
        yield c
    set_service(None)
