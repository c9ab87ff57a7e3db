"""Curve lookup, wrap-around and interpolation."""

from __future__ import annotations

import pytest

from tunnel_sim.timeline.curve import NUM, Curve, InvalidCurve, Waypoint, wrap_minute
from tunnel_sim.timeline.models import STATE_FIELD, XY, XY_FIELD, VisualState

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def num_curve(*pairs: tuple[float, float], period: float | None = None) -> Curve[float]:
    return Curve([Waypoint(m, v) for m, v in pairs], NUM, period)


def vs(x: float, state: str = "transiting", opacity: float = 1.0) -> VisualState:
    return VisualState(x=x, y=0.0, state=state, opacity=opacity)


# ---------------------------------------------------------------------------
# wrap_minute
# ---------------------------------------------------------------------------


class TestWrapMinute:
    def test_inside_period_unchanged(self):
        assert wrap_minute(12.5, 60) == 12.5

    def test_above_period(self):
        assert wrap_minute(125, 60) == 5

    def test_negative_is_floored(self):
        assert wrap_minute(-5, 60) == 55

    def test_tiny_negative_folds_to_zero(self):
        """-1e-18 % 60 rounds to 60.0; the result must stay inside [0, 60)."""
        assert wrap_minute(-1e-18, 60) == 0.0


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestCurveConstruction:
    def test_empty_raises(self):
        with pytest.raises(InvalidCurve):
            Curve([], NUM)

    def test_unsorted_raises(self):
        with pytest.raises(InvalidCurve, match="strictly ascending"):
            num_curve((5, 0), (1, 1))

    def test_duplicate_minute_raises(self):
        with pytest.raises(InvalidCurve):
            num_curve((1, 0), (1, 1))

    def test_non_positive_period_raises(self):
        with pytest.raises(InvalidCurve):
            num_curve((0, 0), period=0)

    def test_len(self):
        assert len(num_curve((0, 0), (1, 1), (2, 2))) == 3


# ---------------------------------------------------------------------------
# Non-periodic lookup
# ---------------------------------------------------------------------------


class TestClampedLookup:
    def test_linear_midpoint(self):
        c = num_curve((0, 0), (10, 100))
        assert c.at(5) == pytest.approx(50)

    def test_before_first_clamps(self):
        c = num_curve((0, 0), (10, 100))
        assert c.at(-5) == 0

    def test_after_last_clamps(self):
        c = num_curve((0, 0), (10, 100))
        assert c.at(15) == 100

    def test_single_point_everywhere(self):
        c = num_curve((3, 7))
        assert c.at(-100) == 7
        assert c.at(3) == 7
        assert c.at(100) == 7

    def test_single_point_periodic(self):
        c = num_curve((3, 7), period=60)
        assert c.at(45) == 7


# ---------------------------------------------------------------------------
# Periodic lookup
# ---------------------------------------------------------------------------


class TestPeriodicLookup:
    def test_after_last_wraps_to_first(self):
        """From (50, 50) to (60, 0): halfway at 55."""
        c = num_curve((0, 0), (50, 50), period=60)
        assert c.at(55) == pytest.approx(25)

    def test_before_first_wraps_from_last(self):
        """From (-10, 50) to (10, 10): halfway at 0."""
        c = num_curve((10, 10), (50, 50), period=60)
        assert c.at(0) == pytest.approx(30)

    def test_negative_query_wraps(self):
        c = num_curve((0, 0), (50, 50), period=60)
        assert c.at(-5) == pytest.approx(c.at(55))

    def test_repeats_every_period(self):
        c = num_curve((10, 10), (30, 70), (50, 50), period=60)
        for t in (0.25, 12.5, 29.75, 44.0, 58.5):
            assert c.at(t) == pytest.approx(c.at(t + 60))
            assert c.at(t) == pytest.approx(c.at(t - 120))

    def test_continuous_across_boundary(self):
        c = num_curve((10, 10), (50, 50), period=60)
        assert c.at(60 - 1e-9) == pytest.approx(c.at(0.0), abs=1e-6)


# ---------------------------------------------------------------------------
# Exact hits and overrides
# ---------------------------------------------------------------------------


class TestKeyframes:
    def test_exact_hit_returns_stored_value(self):
        a, b = vs(0, "queued"), vs(10, "dequeueing")
        c = Curve([Waypoint(0, a), Waypoint(5, b)], STATE_FIELD, 60)
        assert c.at(5) is b
        assert c.at(65) is b

    def test_state_carried_from_earlier_point(self):
        c = Curve([Waypoint(0, vs(0, "queued")), Waypoint(10, vs(100, "transiting"))], STATE_FIELD)
        mid = c.at(5)
        assert mid.state == "queued"
        assert mid.x == pytest.approx(50)

    def test_opacity_interpolates(self):
        c = Curve(
            [Waypoint(0, vs(0, opacity=0.0)), Waypoint(4, vs(0, opacity=1.0))],
            STATE_FIELD,
        )
        assert c.at(1).opacity == pytest.approx(0.25)

    def test_interp_override_applies_to_span_start(self):
        def hold(start, end, minute):
            return start.value

        c = Curve([Waypoint(0, 1.0, hold), Waypoint(10, 5.0)], NUM)
        assert c.at(9) == 1.0

    def test_interpolate_zero_span_raises(self):
        c = num_curve((0, 0), (10, 10))
        with pytest.raises(InvalidCurve):
            c.interpolate(Waypoint(5, 0.0), Waypoint(5, 1.0), 5)

    def test_xy_field(self):
        c = Curve([Waypoint(0, XY(0, 0)), Waypoint(2, XY(10, -4))], XY_FIELD)
        assert c.at(1) == XY(5, -2)
