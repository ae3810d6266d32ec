"""Pydantic-compatible enums shared by the scoring core and the client."""

from enum import StrEnum


class CabinClass(StrEnum):
    """Cabin class for the flight."""

    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"


class TripType(StrEnum):
    """Trip type."""

    ONE_WAY = "oneway"
    ROUND_TRIP = "roundtrip"
    MULTI_CITY = "multicity"


class Persona(StrEnum):
    """Traveler profile selecting the overall-score weight vector."""

    DEFAULT = "default"
    BUSINESS = "business"
    FAMILY = "family"
    STUDENT = "student"
    BUDGET = "budget"


class ScoreDimension(StrEnum):
    """Absolute quality dimensions blended into the overall score."""

    SAFETY = "safety"
    RELIABILITY = "reliability"
    COMFORT = "comfort"
    SERVICE = "service"
    VALUE = "value"
    AMENITIES = "amenities"


class ComparisonMetric(StrEnum):
    """Metrics highlighted in a side-by-side comparison."""

    OVERALL_SCORE = "overall_score"
    PRICE = "price"
    DURATION = "duration"
    STOPS = "stops"
    SAFETY = "safety"
    RELIABILITY = "reliability"
    COMFORT = "comfort"
    SERVICE = "service"
    VALUE = "value"
    WIFI = "wifi"
    POWER = "power"
    ENTERTAINMENT = "entertainment"
    MEAL = "meal"


class TimePreference(StrEnum):
    """Departure part of day."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    ANY = "any"


class SortBy(StrEnum):
    """Result ordering requested by the traveler."""

    SCORE = "score"
    PRICE = "price"
    DURATION = "duration"
    COMFORT = "comfort"
    DEPARTURE = "departure"
    ARRIVAL = "arrival"


class StopsFilter(StrEnum):
    """Stop-count filter produced by the natural-language parser."""

    ANY = "any"
    NONSTOP = "0"
    ONE_STOP = "1"
    TWO_PLUS = "2+"


class AircraftType(StrEnum):
    """Aircraft body type filter."""

    ANY = "any"
    WIDEBODY = "widebody"
    NARROWBODY = "narrowbody"


class Alliance(StrEnum):
    """Airline alliance filter."""

    ANY = "any"
    STAR = "star"
    ONEWORLD = "oneworld"
    SKYTEAM = "skyteam"


class TrackingEventKind(StrEnum):
    """Preference-tracking event kinds posted to the backend."""

    SORT = "sort"
    TIME_FILTER = "time-filter"
    FLIGHT_SELECTION = "flight-selection"
