"""Pydantic schema for the raw constraints an AI parse returns."""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, field_validator

from airease_core.schemas import (
    AircraftType,
    Alliance,
    CabinClass,
    SortBy,
    StopsFilter,
    TimePreference,
)


def _enum_or_default(value: Any, enum_cls: type, default: Any) -> Any:
    """Map empty or unrecognized values onto ``default`` instead of failing."""
    if value is None or value == "":
        return default
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


class ParsedQuery(BaseModel):
    """Constraints extracted from a natural-language flight query.

    Empty strings from the model mean "not mentioned" and are normalized to
    ``None`` or the field default.
    """

    has_destination: bool = False
    destination_city: str = ""
    destination_code: str = ""
    departure_city: str = ""
    departure_code: str = ""
    date: dt.date | None = None
    time_preference: TimePreference = TimePreference.ANY
    passengers: int = 1
    cabin_class: CabinClass = CabinClass.ECONOMY
    sort_by: SortBy = SortBy.SCORE
    stops: StopsFilter = StopsFilter.ANY
    aircraft_type: AircraftType = AircraftType.ANY
    alliance: Alliance = Alliance.ANY
    max_price: float | None = None
    preferred_airlines: list[str] = []

    @field_validator("destination_code", "departure_code", mode="before")
    @classmethod
    def _upper_code(cls, value: Any) -> str:
        return str(value or "").strip().upper()

    @field_validator("destination_city", "departure_city", mode="before")
    @classmethod
    def _strip_city(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("date", mode="before")
    @classmethod
    def _empty_date(cls, value: Any) -> Any:
        return value or None

    @field_validator("passengers", mode="before")
    @classmethod
    def _default_passengers(cls, value: Any) -> Any:
        return value or 1

    @field_validator("max_price", mode="before")
    @classmethod
    def _positive_price(cls, value: Any) -> Any:
        if value in (None, "", 0):
            return None
        return value

    @field_validator("preferred_airlines", mode="before")
    @classmethod
    def _airline_codes(cls, value: Any) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(code).strip().upper() for code in value if str(code).strip()]

    @field_validator("time_preference", mode="before")
    @classmethod
    def _time_preference(cls, value: Any) -> Any:
        return _enum_or_default(value, TimePreference, TimePreference.ANY)

    @field_validator("cabin_class", mode="before")
    @classmethod
    def _cabin_class(cls, value: Any) -> Any:
        return _enum_or_default(value, CabinClass, CabinClass.ECONOMY)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _sort_by(cls, value: Any) -> Any:
        return _enum_or_default(value, SortBy, SortBy.SCORE)

    @field_validator("stops", mode="before")
    @classmethod
    def _stops(cls, value: Any) -> Any:
        return _enum_or_default(value, StopsFilter, StopsFilter.ANY)

    @field_validator("aircraft_type", mode="before")
    @classmethod
    def _aircraft_type(cls, value: Any) -> Any:
        return _enum_or_default(value, AircraftType, AircraftType.ANY)

    @field_validator("alliance", mode="before")
    @classmethod
    def _alliance(cls, value: Any) -> Any:
        return _enum_or_default(value, Alliance, Alliance.ANY)

    @property
    def destination_known(self) -> bool:
        return self.has_destination and bool(self.destination_code)
