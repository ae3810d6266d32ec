"""Flight and facility DTOs as returned by the flight search backend."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import Field, computed_field

from .base import WireModel


class FlightRecord(WireModel):
    """A single flight option. Read-only once fetched."""

    # Flight identification
    id: str
    airline: str
    airline_code: str
    flight_number: str

    # Route
    departure_city: str
    arrival_city: str
    departure_city_code: str
    arrival_city_code: str
    departure_airport: str | None = None
    departure_airport_code: str | None = None
    arrival_airport: str | None = None
    arrival_airport_code: str | None = None

    # Schedule
    departure_time: datetime
    arrival_time: datetime
    duration_minutes: int = Field(ge=0)

    # Flight details
    stops: int = Field(default=0, ge=0)
    stop_cities: list[str] = Field(default_factory=list)
    cabin: str = "economy"
    aircraft_model: str | None = None

    # Fare
    price: float = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    seats_remaining: int | None = None
    booking_token: str | None = None

    # Extra hints from the search provider
    often_delayed: bool | None = None
    is_overnight: bool | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def route(self) -> str:
        """Short route label, e.g. ``HKG → NRT``."""
        return f"{self.departure_city_code} → {self.arrival_city_code}"


class FacilitiesInfo(WireModel):
    """Onboard facilities. ``None`` means unknown and is distinct from ``False``."""

    has_wifi: bool | None = None
    has_power: bool | None = None
    has_ife: bool | None = Field(default=None, alias="hasIFE")
    ife_type: str | None = Field(default=None, alias="ifeType")
    meal_included: bool | None = None
    meal_type: str | None = None
    seat_pitch_inches: float | None = None
    seat_pitch_category: str | None = None

    legroom: str | None = None
    wifi_free: bool | None = None
    has_usb: bool | None = Field(default=None, alias="hasUSB")
