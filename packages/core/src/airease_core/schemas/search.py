"""Search request, natural-language search parameters and response schemas."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .base import WireModel
from .enums import (
    AircraftType,
    Alliance,
    CabinClass,
    Persona,
    SortBy,
    StopsFilter,
    TimePreference,
    TripType,
)
from .score import ScoredFlight  # noqa: TC001


class PassengerCount(BaseModel):
    """Number of passengers by type."""

    adults: int = Field(default=1, ge=1, le=9)
    children: int = Field(default=0, ge=0, le=8)
    infants_in_seat: int = Field(default=0, ge=0, le=4)
    infants_on_lap: int = Field(default=0, ge=0, le=4)

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants_in_seat + self.infants_on_lap

    @model_validator(mode="after")
    def _validate_totals(self) -> PassengerCount:
        total = self.total
        if total > 9:
            msg = f"Total passengers ({total}) exceeds maximum of 9"
            raise ValueError(msg)
        if self.infants_on_lap > self.adults:
            msg = "Each infant on lap requires at least one adult"
            raise ValueError(msg)
        return self


class SearchRequest(BaseModel):
    """Form-based flight search parameters."""

    origin: str = Field(min_length=3, max_length=3, description="IATA airport code")
    destination: str = Field(
        min_length=3, max_length=3, description="IATA airport code"
    )
    departure_date: dt.date
    return_date: dt.date | None = None
    cabin_class: CabinClass = CabinClass.ECONOMY
    trip_type: TripType = TripType.ONE_WAY
    passengers: PassengerCount = Field(default_factory=PassengerCount)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    stops: int | None = Field(default=None, ge=0, le=3)
    max_price: float | None = Field(default=None, gt=0)
    max_duration: int | None = Field(default=None, gt=0)
    include_airlines: list[str] = Field(default_factory=list)
    exclude_airlines: list[str] = Field(default_factory=list)
    sort_by: SortBy = SortBy.SCORE
    traveler_type: Persona = Persona.DEFAULT

    @model_validator(mode="after")
    def _validate_dates(self) -> SearchRequest:
        if self.trip_type == TripType.ROUND_TRIP and self.return_date is None:
            msg = "return_date is required for round-trip"
            raise ValueError(msg)
        if self.return_date and self.return_date < self.departure_date:
            msg = "return_date must be after departure_date"
            raise ValueError(msg)
        return self

    def to_query_params(self) -> dict[str, str | int | float]:
        """Render as the query string expected by ``GET /v1/flights/search``."""
        params: dict[str, str | int | float] = {
            "from": self.origin,
            "to": self.destination,
            "date": self.departure_date.isoformat(),
            "cabin": self.cabin_class.value,
            "adults": self.passengers.adults,
            "children": self.passengers.children,
            "infantsInSeat": self.passengers.infants_in_seat,
            "infantsOnLap": self.passengers.infants_on_lap,
            "currency": self.currency,
            "sortBy": self.sort_by.value,
            "travelerType": self.traveler_type.value,
        }
        if self.return_date is not None:
            params["returnDate"] = self.return_date.isoformat()
        if self.stops is not None:
            params["stops"] = self.stops
        if self.max_price is not None:
            params["maxPrice"] = self.max_price
        if self.max_duration is not None:
            params["maxDuration"] = self.max_duration
        if self.include_airlines:
            params["includeAirlines"] = ",".join(self.include_airlines)
        if self.exclude_airlines:
            params["excludeAirlines"] = ",".join(self.exclude_airlines)
        return params


class SearchParams(BaseModel):
    """A fully specified search produced by natural-language parsing."""

    departure_city: str
    departure_city_code: str = Field(min_length=3, max_length=3)
    arrival_city: str
    arrival_city_code: str = Field(min_length=3, max_length=3)
    date: dt.date
    time_preference: TimePreference = TimePreference.ANY
    passengers: int = Field(default=1, ge=1, le=9)
    cabin_class: CabinClass = CabinClass.ECONOMY
    sort_by: SortBy = SortBy.SCORE
    stops: StopsFilter = StopsFilter.ANY
    aircraft_type: AircraftType = AircraftType.ANY
    alliance: Alliance = Alliance.ANY
    max_price: float | None = Field(default=None, gt=0)
    preferred_airlines: list[str] = Field(default_factory=list)


class SearchMeta(WireModel):
    """Paging and cache metadata attached to search results."""

    total: int = 0
    search_id: str = ""
    cached_at: dt.datetime | None = None
    restricted_count: int = 0
    is_authenticated: bool = False
    limit: int = 0
    offset: int = 0
    has_more: bool = False


class PriceInsights(WireModel):
    """Route-level price context."""

    lowest_price: float | None = None
    price_level: Literal["low", "typical", "high"] | None = None
    typical_price_range: tuple[float, float] | None = None


class FlightSearchResponse(WireModel):
    """Response body of ``GET /v1/flights/search``."""

    flights: list[ScoredFlight] = Field(default_factory=list)
    meta: SearchMeta = Field(default_factory=SearchMeta)
    price_insights: PriceInsights | None = None


class PricePoint(WireModel):
    date: dt.date
    price: float


class PriceHistory(WireModel):
    """Historical prices for a single flight."""

    flight_id: str
    points: list[PricePoint] = Field(default_factory=list)
    current_price: float
    trend: Literal["rising", "falling", "stable"] = "stable"
    price_level: Literal["low", "typical", "high"] | None = None
    typical_price_range: tuple[float, float] | None = None
    lowest_price: float | None = None


class FlightDetail(ScoredFlight):
    """Response body of ``GET /v1/flights/{id}``."""

    price_history: PriceHistory | None = None


class MultiCityLeg(BaseModel):
    """One leg of a multi-city itinerary."""

    origin: str = Field(min_length=3, max_length=3)
    destination: str = Field(min_length=3, max_length=3)
    departure_date: dt.date


class AirportCoordinates(WireModel):
    """Airport location as returned by the airport lookup endpoints."""

    iata_code: str
    name: str
    municipality: str | None = None
    country: str | None = None
    latitude: float
    longitude: float


class GeoLocation(BaseModel):
    """A device position supplied with a natural-language query."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class SearchHistoryCreate(BaseModel):
    """Body of ``POST /v1/users/search-history``."""

    departure_city: str
    arrival_city: str
    departure_date: dt.date
    return_date: dt.date | None = None
    passengers: int = Field(default=1, ge=1)
    cabin_class: str = CabinClass.ECONOMY.value


class SearchHistoryItem(SearchHistoryCreate):
    """A saved search."""

    id: int
    created_at: dt.datetime
