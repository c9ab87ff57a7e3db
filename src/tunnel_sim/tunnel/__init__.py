"""Tunnel orchestration: phases, one direction, and the direction pair."""

from tunnel_sim.tunnel.phases import PHASES, PhaseBoundaryError, PhaseSchedule
from tunnel_sim.tunnel.tunnel import Tunnel
from tunnel_sim.tunnel.tunnels import ESCORT_IDS, Tunnels, VehicleSnapshot

__all__ = [
    "ESCORT_IDS",
    "PHASES",
    "PhaseBoundaryError",
    "PhaseSchedule",
    "Tunnel",
    "Tunnels",
    "VehicleSnapshot",
]
