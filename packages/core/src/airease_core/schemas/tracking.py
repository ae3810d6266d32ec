"""Preference-tracking events and the profile the backend derives from them."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import BaseModel, Field

from .enums import TrackingEventKind


class TrackingEvent(BaseModel):
    """Base for one-way preference events."""

    kind: ClassVar[TrackingEventKind]

    @property
    def path(self) -> str:
        return f"/v1/preferences/track/{self.kind.value}"


class SortEvent(TrackingEvent):
    kind: ClassVar[TrackingEventKind] = TrackingEventKind.SORT

    sort_by: str


class TimeFilterEvent(TrackingEvent):
    kind: ClassVar[TrackingEventKind] = TrackingEventKind.TIME_FILTER

    time_range: str


class FlightSelectionEvent(TrackingEvent):
    kind: ClassVar[TrackingEventKind] = TrackingEventKind.FLIGHT_SELECTION

    flight_id: str
    flight_number: str | None = None
    airline: str
    airline_code: str | None = None
    departure_city: str
    arrival_city: str
    departure_time: str
    price: float
    overall_score: float
    cabin: str | None = None


class UserPreferences(BaseModel):
    """Full preference profile from ``GET /v1/preferences/my-preferences``."""

    preferred_sort: str = "score"
    preferred_time_range: str = ""
    preferred_airlines: list[str] = Field(default_factory=list)
    price_sensitivity: Literal["high", "medium", "low"] = "medium"
    sort_counts: dict[str, int] = Field(default_factory=dict)
    time_range_counts: dict[str, int] = Field(default_factory=dict)
    airline_counts: dict[str, int] = Field(default_factory=dict)
    total_sort_actions: int = 0
    total_selections: int = 0
    has_preferences: bool = False
