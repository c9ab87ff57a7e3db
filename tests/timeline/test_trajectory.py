"""Fill-forward, normalization and curve building for one vehicle."""

from __future__ import annotations

import pytest

from tunnel_sim.timeline.curve import Waypoint
from tunnel_sim.timeline.models import VisualState
from tunnel_sim.timeline.trajectory import (
    TrajectoryBuilder,
    TrajectoryError,
    fill_forward,
    keep_last_per_minute,
    waypoint,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def lap_points() -> list:
    """A vehicle that fades in, crosses, and resets, partly past the period."""
    return [
        waypoint(-1, x=-80.0, y=45.0, state="origin", opacity=0.0),
        waypoint(0, x=0.0, state="transiting", opacity=1.0),
        waypoint(5, x=800.0, state="exiting"),
        waypoint(65, state="done", opacity=0.0),
    ]


# ---------------------------------------------------------------------------
# fill_forward
# ---------------------------------------------------------------------------


class TestFillForward:
    def test_empty_raises(self):
        with pytest.raises(TrajectoryError, match="has no points defined"):
            fill_forward([], "bike-e-0")

    def test_first_point_must_be_complete(self):
        with pytest.raises(TrajectoryError, match="opacity"):
            fill_forward([waypoint(0, x=0.0, y=0.0, state="origin")], "car")

    def test_unknown_state_rejected(self):
        pts = [
            waypoint(0, x=0.0, y=0.0, state="queued", opacity=1.0),
            waypoint(1, state="parked"),
        ]
        with pytest.raises(TrajectoryError, match="parked"):
            fill_forward(pts, "car-e-R-0")

    def test_unset_fields_copied_from_previous(self):
        filled = fill_forward(lap_points())
        assert filled[1].value.y == 45.0
        assert filled[2].value.opacity == 1.0
        assert filled[3].value.x == 800.0
        assert all(isinstance(p.value, VisualState) for p in filled)

    def test_direction_fills_forward_once_set(self):
        pts = [
            waypoint(0, x=0.0, y=0.0, state="queued", opacity=1.0),
            waypoint(1, direction="east"),
            waypoint(2, x=5.0),
        ]
        filled = fill_forward(pts)
        assert filled[0].value.direction is None
        assert filled[2].value.direction == "east"

    def test_interp_override_preserved(self):
        def hold(start, end, minute):
            return start.value

        pts = [waypoint(0, hold, x=0.0, y=0.0, state="queued", opacity=1.0)]
        assert fill_forward(pts)[0].interp is hold


# ---------------------------------------------------------------------------
# keep_last_per_minute
# ---------------------------------------------------------------------------


class TestKeepLastPerMinute:
    def test_sorts_stably(self):
        a = VisualState(0, 0, "origin", 0)
        b = VisualState(1, 0, "queued", 1)
        out = keep_last_per_minute([Waypoint(5, b), Waypoint(1, a)])
        assert [p.minute for p in out] == [1, 5]

    def test_later_declared_wins_tie(self):
        a = VisualState(0, 0, "queued", 1)
        b = VisualState(0, 0, "dequeueing", 1)
        out = keep_last_per_minute([Waypoint(3, a), Waypoint(3, b)])
        assert len(out) == 1
        assert out[0].value.state == "dequeueing"


# ---------------------------------------------------------------------------
# TrajectoryBuilder
# ---------------------------------------------------------------------------


class TestTrajectoryBuilder:
    def test_invalid_period(self):
        with pytest.raises(ValueError):
            TrajectoryBuilder(0)

    def test_times_wrapped_into_period(self):
        points = TrajectoryBuilder(60).normalize(lap_points())
        assert [p.minute for p in points] == [0, 5, 59]

    def test_wrapped_collision_keeps_later_declared(self):
        """-1 and 65 land on 59 and 5; the exit at 5 is declared before the reset at 65."""
        points = TrajectoryBuilder(60).normalize(lap_points())
        at_5 = points[1].value
        assert at_5.state == "done"
        assert at_5.opacity == 0.0

    def test_build_periodic_curve(self):
        curve = TrajectoryBuilder(60, "car-e-L-0").build(lap_points())
        assert curve.period == 60
        assert curve.at(0).x == 0.0
        assert curve.at(120).x == 0.0

    def test_build_is_idempotent(self):
        builder = TrajectoryBuilder(60)
        first = builder.build(lap_points())
        second = builder.build(lap_points())
        assert first.points == second.points
        assert first is not second

    def test_errors_name_the_vehicle(self):
        with pytest.raises(TrajectoryError, match="pace"):
            TrajectoryBuilder(60, "pace").build([])
