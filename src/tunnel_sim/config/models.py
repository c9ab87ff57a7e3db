"""Configuration records for the tunnel engine.

All records are frozen: a change of configuration is a new record handed to
:meth:`~tunnel_sim.tunnel.tunnel.Tunnel.reconfigure`, never an in-place edit.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from tunnel_sim.timeline.models import DIRECTIONS


def _require_positive(record: object, names: tuple[str, ...]) -> None:
    for name in names:
        value = getattr(record, name)
        if value <= 0:
            raise ValueError(f"{type(record).__name__}.{name} must be > 0, got {value}")


@dataclass(frozen=True)
class Layout:
    """Pixel geometry shared by both directions.

    Everything that depends on the viewport lives here, so a responsive resize
    is a new :class:`Layout` and nothing else.
    """

    lane_width_px: float = 800.0
    """Tunnel length on screen (entrance to exit)."""

    lane_height_px: float = 30.0

    bikes_per_row: int = 5
    """Pen grid columns."""

    bike_spacing_x_px: float = 20.0
    bike_spacing_y_px: float = 15.0

    pen_offset_x_px: float = 75.0
    """Pen anchor distance back from the R-lane entrance."""

    pen_offset_y_px: float = 65.0
    """Pen anchor distance outward (away from the L lane) from the R lane."""

    queued_car_width_px: float = 30.0
    car_queue_offset_px: float = 50.0
    """Distance from the R-lane entrance to the head of the car queue."""

    def __post_init__(self) -> None:
        _require_positive(
            self,
            (
                "lane_width_px",
                "lane_height_px",
                "bikes_per_row",
                "bike_spacing_x_px",
                "bike_spacing_y_px",
                "queued_car_width_px",
            ),
        )

    def resized(self, lane_width_px: float) -> Layout:
        """Return a copy with a different tunnel width."""
        return replace(self, lane_width_px=lane_width_px)


@dataclass(frozen=True)
class TunnelConfig:
    """One direction's schedule, speeds and rates.

    Minutes are relative to the direction's pen opening (``offset_min`` in
    absolute clock minutes) unless stated otherwise.
    """

    direction: str
    """``'east'`` or ``'west'``."""

    offset_min: float
    """Absolute minute at which this direction's cycle starts (pen opens)."""

    period: float = 60.0
    length_mi: float = 2.0

    car_mph: float = 24.0
    bike_down_mph: float = 15.0
    """Bike speed over the first (downhill) half of the tunnel."""

    bike_up_mph: float = 8.0
    """Bike speed over the second (uphill) half of the tunnel."""

    bike_flat_mph: float = 12.0
    """Bike speed outside the tunnel (approach and exit fades)."""

    pen_close_min: float = 3.0
    sweep_start_min: float = 5.0
    pace_start_min: float = 10.0
    official_reset_mins: float = 5.0
    """Length of the pace-car phase; the normal phase starts after it."""

    cars_per_min: float = 1.0
    """Arrival rate per lane."""

    cars_released_per_min: float = 5.0
    bikes_per_min: float = 0.25
    bikes_released_per_min: float = 5.0

    fade_mins: float = 1.0
    """Time spent fading in before arrival and fading out after exit."""

    merge_mins: float = 0.5
    """Time an R-lane car takes to fold into the L lane."""

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {self.direction!r}")
        _require_positive(
            self,
            (
                "period",
                "length_mi",
                "car_mph",
                "bike_down_mph",
                "bike_up_mph",
                "bike_flat_mph",
                "cars_per_min",
                "cars_released_per_min",
                "bikes_per_min",
                "bikes_released_per_min",
                "fade_mins",
                "merge_mins",
            ),
        )
        car_transit = self.transit_mins(self.car_mph)
        if self.merge_mins >= car_transit:
            raise ValueError(
                f"merge_mins ({self.merge_mins}) must be shorter than the car transit time ({car_transit:g} min)"
            )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def d(self) -> int:
        """Direction sign: +1 eastbound (x grows), -1 westbound."""
        return 1 if self.direction == "east" else -1

    @property
    def normal_start_min(self) -> float:
        return self.pace_start_min + self.official_reset_mins

    @property
    def n_bikes(self) -> int:
        return _whole(self.period * self.bikes_per_min, "bikes_per_min")

    @property
    def n_cars(self) -> int:
        """Cars per lane per period."""
        return _whole(self.period * self.cars_per_min, "cars_per_min")

    def transit_mins(self, mph: float) -> float:
        """Minutes to cross the tunnel at *mph*."""
        return self.length_mi / mph * 60.0

    def px_per_min(self, mph: float, layout: Layout) -> float:
        """On-screen speed of a vehicle travelling at *mph*."""
        return mph / self.length_mi * layout.lane_width_px / 60.0


def _whole(count: float, name: str) -> int:
    n = round(count)
    if abs(n - count) > 1e-9:
        raise ValueError(f"{name} must yield a whole number of vehicles per period, got {count}")
    return n


@dataclass(frozen=True)
class EscortConfig:
    """Sweep or pace vehicle settings."""

    mph: float
    staging_offset_px: float
    """Horizontal distance from the R-lane entrance while staged."""

    vertical_offset_px: float
    """Distance outward from the R lane while staged."""

    def __post_init__(self) -> None:
        _require_positive(self, ("mph",))


@dataclass(frozen=True)
class TunnelsConfig:
    """Both directions plus the escort vehicles that alternate between them."""

    eastbound: TunnelConfig
    westbound: TunnelConfig
    sweep: EscortConfig
    pace: EscortConfig
    layout: Layout = Layout()

    def __post_init__(self) -> None:
        if self.eastbound.direction != "east" or self.westbound.direction != "west":
            raise ValueError("eastbound/westbound configs must have matching directions")
        shared = ("period", "length_mi", "sweep_start_min", "pace_start_min", "official_reset_mins")
        for name in shared:
            if getattr(self.eastbound, name) != getattr(self.westbound, name):
                raise ValueError(f"eastbound and westbound must share {name}")

    def with_layout(self, layout: Layout) -> TunnelsConfig:
        return replace(self, layout=layout)

    def to_dict(self) -> dict:
        def flat(record: object) -> dict:
            return {f.name: getattr(record, f.name) for f in fields(record)}

        return {
            "eastbound": flat(self.eastbound),
            "westbound": flat(self.westbound),
            "sweep": flat(self.sweep),
            "pace": flat(self.pace),
            "layout": flat(self.layout),
        }
