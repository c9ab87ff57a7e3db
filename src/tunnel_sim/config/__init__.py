"""Tunnel configuration records and defaults."""

from tunnel_sim.config.defaults import HOLLAND_TUNNEL, layout_from_env
from tunnel_sim.config.models import EscortConfig, Layout, TunnelConfig, TunnelsConfig

__all__ = [
    "HOLLAND_TUNNEL",
    "EscortConfig",
    "Layout",
    "TunnelConfig",
    "TunnelsConfig",
    "layout_from_env",
]
