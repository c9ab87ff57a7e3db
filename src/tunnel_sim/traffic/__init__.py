"""Queueing, lane merging and cycle splitting for tunnel traffic."""

from tunnel_sim.traffic.merge import LaneMerge
from tunnel_sim.traffic.models import MergePlan, QueueRecord
from tunnel_sim.traffic.queueing import (
    BikePenQueue,
    CarReleaseQueue,
    QueueCapacityError,
    check_capacity,
)
from tunnel_sim.traffic.splitter import CONTINUATION_SUFFIX, CycleSplitter, SplitResult

__all__ = [
    "CONTINUATION_SUFFIX",
    "BikePenQueue",
    "CarReleaseQueue",
    "CycleSplitter",
    "LaneMerge",
    "MergePlan",
    "QueueCapacityError",
    "QueueRecord",
    "SplitResult",
    "check_capacity",
]
