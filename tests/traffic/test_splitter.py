"""Cycle splitting of trajectories longer than one period."""

from __future__ import annotations

import pytest

from tunnel_sim.timeline.curve import Curve, Waypoint
from tunnel_sim.timeline.models import STATE_FIELD, VisualState
from tunnel_sim.timeline.trajectory import TrajectoryBuilder, TrajectoryError
from tunnel_sim.traffic.splitter import CycleSplitter

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def wp(minute: float, x: float, state: str, opacity: float = 1.0) -> Waypoint[VisualState]:
    return Waypoint(minute, VisualState(x=x, y=110.0, state=state, opacity=opacity))


def long_bike() -> list[Waypoint[VisualState]]:
    """Queued for 56 minutes; fade-in at -1 and reset at 65.7 span 66.7 minutes."""
    return [
        wp(-1, -80, "origin", 0.0),
        wp(0, 0, "queued"),
        wp(56, 0, "dequeueing"),
        wp(56.2, 10, "transiting"),
        wp(63.7, 100, "exiting"),
        wp(64.7, 110, "done", 0.0),
        wp(65.7, -80, "origin", 0.0),
    ]


def short_car() -> list[Waypoint[VisualState]]:
    return [
        wp(-1, -160, "origin", 0.0),
        wp(0, 0, "transiting"),
        wp(5, 800, "exiting"),
        wp(6, 960, "done", 0.0),
        wp(7, -160, "origin", 0.0),
    ]


def assert_same(a: VisualState, b: VisualState) -> None:
    assert a.x == pytest.approx(b.x)
    assert a.y == pytest.approx(b.y)
    assert a.opacity == pytest.approx(b.opacity)
    assert a.state == b.state


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestCycleSplitter:
    def test_short_trajectory_untouched(self):
        result = CycleSplitter(60).split(short_car(), 3.0, "car-e-L-3")
        assert not result.was_split
        assert result.stub == short_car()
        assert result.continuation is None

    def test_cut_position(self):
        result = CycleSplitter(60).split(long_bike(), 4.0, "bike-e-1")
        assert result.was_split
        assert result.cut_min == pytest.approx(6.7)
        assert result.continuation_spawn == pytest.approx(10.7)

    def test_stub_shape(self):
        splitter = CycleSplitter(60)
        result = splitter.split(long_bike(), 4.0)
        minutes = [p.minute for p in result.stub]
        assert minutes[:2] == [-1, 0]
        assert minutes[-2] == pytest.approx(6.7)
        assert minutes[-1] == pytest.approx(6.7 + splitter.epsilon)
        hidden = result.stub[-1].value
        assert hidden.opacity == 0.0
        assert hidden.state == "origin"

    def test_continuation_shape(self):
        splitter = CycleSplitter(60)
        result = splitter.split(long_bike(), 4.0)
        minutes = [p.minute for p in result.continuation]
        assert minutes[0] == -splitter.epsilon
        assert minutes[1] == 0.0
        assert minutes[-1] == pytest.approx(59.0)
        assert result.continuation[0].value.opacity == 0.0
        assert result.continuation[1].value.state == "queued"

    def test_pieces_reproduce_original(self):
        original = Curve(long_bike(), STATE_FIELD)
        result = CycleSplitter(60).split(long_bike(), 4.0)
        cut = result.cut_min
        stub = Curve(result.stub, STATE_FIELD)
        cont = Curve(result.continuation, STATE_FIELD)

        for t in (-1.0, -0.5, 0.0, 3.0, 6.0):
            assert_same(stub.at(t), original.at(t))
        for t in (10.0, 56.1, 60.0, 63.7, 65.0, 65.7):
            assert_same(cont.at(t - cut), original.at(t))

    def test_pieces_build_as_periodic_curves(self):
        result = CycleSplitter(60).split(long_bike(), 4.0)
        builder = TrajectoryBuilder(60)
        builder.build(result.stub)
        builder.build(result.continuation)

    def test_trajectory_too_long_for_stub(self):
        pts = [wp(0, 0, "queued"), wp(120, 0, "origin", 0.0)]
        with pytest.raises(TrajectoryError, match="cannot be split"):
            CycleSplitter(60).split(pts, 0.0)

    def test_empty_raises(self):
        with pytest.raises(TrajectoryError):
            CycleSplitter(60).split([], 0.0)
