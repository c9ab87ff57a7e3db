"""Vehicle curve memoization and relative-minute queries."""

from __future__ import annotations

import pytest

from tunnel_sim.timeline.trajectory import waypoint
from tunnel_sim.vehicles.vehicle import Vehicle, fixed_source


class CountingSource:
    """Waypoint source that records how often it is asked."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return [
            waypoint(0, x=0.0, y=15.0, state="transiting", opacity=1.0),
            waypoint(10, x=100.0),
        ]


def make_vehicle(source=None, spawn: float = 5.0) -> Vehicle:
    return Vehicle("car-e-L-0", "car", spawn, 60.0, source or CountingSource(), lane_id="L")


class TestVehicleCurve:
    def test_curve_is_memoized(self):
        src = CountingSource()
        v = make_vehicle(src)
        first = v.curve
        assert v.curve is first
        assert src.calls == 1

    def test_invalidate_rebuilds_lazily(self):
        src = CountingSource()
        v = make_vehicle(src)
        first = v.curve
        v.invalidate()
        assert src.calls == 1
        assert v.curve is not first
        assert src.calls == 2

    def test_rebuild_swaps_curve(self):
        v = make_vehicle()
        first = v.curve
        second = v.rebuild()
        assert second is not first
        assert v.curve is second

    def test_fixed_source(self):
        pts = CountingSource()()
        v = make_vehicle(fixed_source(pts))
        assert v.curve.at(0).x == 0.0


class TestVehicleQueries:
    def test_at_uses_spawn_offset(self):
        v = make_vehicle(spawn=5.0)
        assert v.at(10.0).x == pytest.approx(50.0)

    def test_local_minute_wraps(self):
        v = make_vehicle(spawn=5.0)
        assert v.local_minute(2.0) == 57.0

    def test_periodic(self):
        v = make_vehicle(spawn=5.0)
        assert v.at(12.5).x == pytest.approx(v.at(72.5).x)


class TestVehicleValidation:
    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            Vehicle("x", "truck", 0.0, 60.0, CountingSource())

    def test_spawn_outside_period(self):
        with pytest.raises(ValueError):
            Vehicle("x", "car", 60.0, 60.0, CountingSource())

    def test_unknown_lane(self):
        with pytest.raises(ValueError, match="lane_id"):
            Vehicle("x", "car", 0.0, 60.0, CountingSource(), lane_id="C")

    def test_escort_without_lane(self):
        v = Vehicle("sweep", "sweep", 0.0, 60.0, CountingSource())
        assert v.lane_id is None
