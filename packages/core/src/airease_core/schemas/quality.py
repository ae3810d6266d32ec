"""Optional airline / aircraft datasets feeding the absolute score dimensions."""

from __future__ import annotations

from pydantic import Field

from .base import WireModel


class IncidentHistory(WireModel):
    """Incident counts from accident and incident records."""

    aircraft_incidents: int = Field(default=0, ge=0)
    airline_incidents: int = Field(default=0, ge=0)
    aircraft_type_incidents: int = Field(default=0, ge=0)


class ComfortSpec(WireModel):
    """Seat and cabin measurements. Any field may be missing."""

    seat_pitch_inches: float | None = Field(default=None, ge=0)
    seat_width_inches: float | None = Field(default=None, ge=0)
    recline_inches: float | None = Field(default=None, ge=0)
    aircraft_age_years: float | None = Field(default=None, ge=0)


class ServiceRatings(WireModel):
    """Passenger review averages on a 0-5 scale."""

    rating: float | None = Field(default=None, ge=0, le=5)
    food_rating: float | None = Field(default=None, ge=0, le=5)
    crew_rating: float | None = Field(default=None, ge=0, le=5)


class FlightQualityData(WireModel):
    """Everything known about a flight beyond the search record itself."""

    incidents: IncidentHistory | None = None
    on_time_rate: float | None = Field(default=None, ge=0, le=1)
    comfort: ComfortSpec | None = None
    service: ServiceRatings | None = None
    route_average_price: float | None = Field(default=None, gt=0)
