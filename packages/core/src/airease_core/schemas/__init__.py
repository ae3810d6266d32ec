"""Core schemas for AirEase."""

from .enums import (
    AircraftType,
    Alliance,
    CabinClass,
    ComparisonMetric,
    Persona,
    ScoreDimension,
    SortBy,
    StopsFilter,
    TimePreference,
    TrackingEventKind,
    TripType,
)
from .flight import FacilitiesInfo, FlightRecord
from .quality import ComfortSpec, FlightQualityData, IncidentHistory, ServiceRatings
from .score import (
    FactorScore,
    FlightScore,
    RelativeScores,
    ScoreDimensions,
    ScoredFlight,
)
from .search import (
    AirportCoordinates,
    FlightDetail,
    FlightSearchResponse,
    GeoLocation,
    MultiCityLeg,
    PassengerCount,
    PriceHistory,
    PriceInsights,
    PricePoint,
    SearchHistoryCreate,
    SearchHistoryItem,
    SearchMeta,
    SearchParams,
    SearchRequest,
)
from .tracking import (
    FlightSelectionEvent,
    SortEvent,
    TimeFilterEvent,
    TrackingEvent,
    UserPreferences,
)

__all__ = [
    "AircraftType",
    "AirportCoordinates",
    "Alliance",
    "CabinClass",
    "ComfortSpec",
    "ComparisonMetric",
    "FacilitiesInfo",
    "FactorScore",
    "FlightDetail",
    "FlightQualityData",
    "FlightRecord",
    "FlightScore",
    "FlightSearchResponse",
    "FlightSelectionEvent",
    "GeoLocation",
    "IncidentHistory",
    "MultiCityLeg",
    "PassengerCount",
    "Persona",
    "PriceHistory",
    "PriceInsights",
    "PricePoint",
    "RelativeScores",
    "ScoreDimension",
    "ScoreDimensions",
    "ScoredFlight",
    "SearchHistoryCreate",
    "SearchHistoryItem",
    "SearchMeta",
    "SearchParams",
    "SearchRequest",
    "ServiceRatings",
    "SortBy",
    "SortEvent",
    "StopsFilter",
    "TimeFilterEvent",
    "TimePreference",
    "TrackingEvent",
    "TrackingEventKind",
    "TripType",
    "UserPreferences",
]
