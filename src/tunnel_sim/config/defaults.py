"""Default Holland Tunnel schedule and environment overrides."""

from __future__ import annotations

import os

from tunnel_sim.config.models import EscortConfig, Layout, TunnelConfig, TunnelsConfig

HOLLAND_TUNNEL = TunnelsConfig(
    # Eastbound pen opens at :45, westbound at :15.
    eastbound=TunnelConfig(direction="east", offset_min=45.0),
    westbound=TunnelConfig(direction="west", offset_min=15.0),
    sweep=EscortConfig(mph=12.0, staging_offset_px=35.0, vertical_offset_px=30.0),
    pace=EscortConfig(mph=24.0, staging_offset_px=60.0, vertical_offset_px=60.0),
)

LANE_WIDTH_ENV = "TUNNEL_SIM_LANE_WIDTH_PX"


def layout_from_env(base: Layout | None = None) -> Layout:
    """Return *base* (default :class:`Layout`) with environment overrides applied.

    Raises:
        ValueError: If ``TUNNEL_SIM_LANE_WIDTH_PX`` is set but not a positive number.
    """
    layout = base or Layout()
    raw = os.environ.get(LANE_WIDTH_ENV, "").strip()
    if raw:
        layout = layout.resized(float(raw))
    return layout
