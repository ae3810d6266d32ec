"""Natural language search: parse, complete and describe a flight query."""

from __future__ import annotations

import datetime as dt
import logging
from enum import StrEnum
from typing import TYPE_CHECKING

import anthropic
import httpx
from pydantic import BaseModel, ValidationError

from airease_client.config import ClientSettings, settings
from airease_core.schemas import (
    AircraftType,
    Alliance,
    SearchParams,
    StopsFilter,
    TimePreference,
)
from airease_ml.errors import (
    AIProviderUnavailable,
    AIRequestRejected,
    AIResponseUnparseable,
    ResponseTruncated,
)
from airease_ml.nlp import parse_natural_query

if TYPE_CHECKING:
    from airease_client.api import AireaseClient
    from airease_core.schemas import AirportCoordinates, GeoLocation
    from airease_ml.nlp import ParsedQuery

logger = logging.getLogger(__name__)

# Departure hour windows for each part of day; night wraps past midnight
TIME_WINDOWS: dict[TimePreference, tuple[int, int]] = {
    TimePreference.MORNING: (6, 12),
    TimePreference.AFTERNOON: (12, 18),
    TimePreference.EVENING: (18, 22),
    TimePreference.NIGHT: (22, 6),
}

MISSING_DESTINATION_MESSAGE = (
    'Please specify a destination. For example: "fly to Tokyo" or "去上海"'
)
LOCATION_UNAVAILABLE_MESSAGE = (
    "Could not determine your location. Please specify where you are "
    'flying from, e.g., "from Hong Kong to Tokyo"'
)
AI_UNAVAILABLE_MESSAGE = (
    "The AI assistant is busy right now. Please try again in a moment "
    "or use the search form."
)
AI_REJECTED_MESSAGE = (
    "The AI assistant can't take requests right now. Please use the search "
    "form or try again later."
)
AI_UNPARSEABLE_MESSAGE = (
    "Sorry, I couldn't understand that. Try something like "
    '"cheapest flight to Tokyo tomorrow morning".'
)


class NaturalSearchFailure(StrEnum):
    """Why a natural language search could not be completed."""

    MISSING_DESTINATION = "missing_destination"
    LOCATION_UNAVAILABLE = "location_unavailable"
    AI_RESPONSE_UNPARSEABLE = "ai_response_unparseable"
    AI_UNAVAILABLE = "ai_unavailable"
    AI_REJECTED = "ai_rejected"


class NaturalSearchResult(BaseModel):
    """Either a fully specified search or a structured failure."""

    success: bool
    params: SearchParams | None = None
    message: str | None = None
    failure: NaturalSearchFailure | None = None
    error: str | None = None

    @classmethod
    def failed(cls, failure: NaturalSearchFailure, error: str) -> NaturalSearchResult:
        return cls(success=False, failure=failure, error=error)


def time_preference_for_hour(hour: int) -> TimePreference:
    """Part of day for a local clock hour."""
    if 6 <= hour < 12:
        return TimePreference.MORNING
    if 12 <= hour < 18:
        return TimePreference.AFTERNOON
    if 18 <= hour < 22:
        return TimePreference.EVENING
    return TimePreference.NIGHT


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_message(params: SearchParams) -> str:
    """Human-readable summary of a completed search."""
    parts: list[str] = [params.time_preference.value]
    if params.stops == StopsFilter.NONSTOP:
        parts.append("direct")
    elif params.stops == StopsFilter.ONE_STOP:
        parts.append("1-stop")
    if params.aircraft_type != AircraftType.ANY:
        parts.append(params.aircraft_type.value)
    parts.append("flights")
    parts.append(f"from {params.departure_city} to {params.arrival_city}")
    parts.append(f"on {params.date.isoformat()}")
    if params.max_price is not None:
        parts.append(f"under ${_format_amount(params.max_price)}")
    if params.preferred_airlines:
        parts.append(f"({', '.join(params.preferred_airlines)})")
    return "Searching for " + " ".join(parts)


def to_query_params(params: SearchParams) -> dict[str, str]:
    """Render a completed search as results-page query parameters."""
    query = {
        "from": params.departure_city_code,
        "to": params.arrival_city_code,
        "date": params.date.isoformat(),
        "cabin": params.cabin_class.value,
        "adults": str(params.passengers),
        "children": "0",
        "tripType": "oneway",
        "sortBy": params.sort_by.value,
    }
    if params.stops != StopsFilter.ANY:
        query["stops"] = params.stops.value
    if params.aircraft_type != AircraftType.ANY:
        query["aircraftType"] = params.aircraft_type.value
    if params.alliance != Alliance.ANY:
        query["alliance"] = params.alliance.value
    if params.max_price is not None:
        query["maxPrice"] = _format_amount(params.max_price)
    if params.preferred_airlines:
        query["airlines"] = ",".join(params.preferred_airlines)
    window = TIME_WINDOWS.get(params.time_preference)
    if window is not None:
        query["depMin"], query["depMax"] = str(window[0]), str(window[1])
    return query


class NaturalSearchService:
    """Turns free text plus an optional position into a complete search."""

    def __init__(
        self,
        client: AireaseClient,
        *,
        anthropic_client: anthropic.AsyncAnthropic | None = None,
        config: ClientSettings | None = None,
    ) -> None:
        self._client = client
        self._anthropic = anthropic_client
        self._config = config or settings

    async def search(
        self,
        query: str,
        location: GeoLocation | None = None,
        *,
        now: dt.datetime | None = None,
    ) -> NaturalSearchResult:
        """Parse ``query`` and fill in whatever the user left out.

        Never raises for AI or lookup failures; those come back as a failed
        result with a user-facing ``error``.
        """
        now = now or dt.datetime.now()
        try:
            parsed = await parse_natural_query(
                query,
                client=self._anthropic,
                api_key=self._config.anthropic_api_key or None,
                today=now.date().isoformat(),
                model=self._config.anthropic_model,
                max_tokens=self._config.ai_max_tokens,
                policy=self._config.ai_backoff,
                truncation_attempts=self._config.ai_truncation_attempts,
            )
        except (AIProviderUnavailable, ResponseTruncated) as exc:
            logger.warning("AI parse unavailable: %s", exc)
            return NaturalSearchResult.failed(
                NaturalSearchFailure.AI_UNAVAILABLE, AI_UNAVAILABLE_MESSAGE
            )
        except (AIRequestRejected, anthropic.APIError) as exc:
            logger.error("AI parse rejected: %s", exc)
            return NaturalSearchResult.failed(
                NaturalSearchFailure.AI_REJECTED, AI_REJECTED_MESSAGE
            )
        except AIResponseUnparseable as exc:
            logger.warning("AI parse failed: %s", exc)
            return NaturalSearchResult.failed(
                NaturalSearchFailure.AI_RESPONSE_UNPARSEABLE, AI_UNPARSEABLE_MESSAGE
            )

        if not parsed.destination_known:
            return NaturalSearchResult.failed(
                NaturalSearchFailure.MISSING_DESTINATION, MISSING_DESTINATION_MESSAGE
            )

        departure_city = parsed.departure_city or parsed.departure_code
        departure_code = parsed.departure_code
        if not departure_code:
            airport = await self._nearest_airport(location)
            if airport is None:
                return NaturalSearchResult.failed(
                    NaturalSearchFailure.LOCATION_UNAVAILABLE,
                    LOCATION_UNAVAILABLE_MESSAGE,
                )
            departure_city = airport.municipality or airport.name
            departure_code = airport.iata_code

        try:
            params = self._complete(parsed, departure_city, departure_code, now)
        except ValidationError as exc:
            logger.warning("AI parse produced an invalid search: %s", exc)
            return NaturalSearchResult.failed(
                NaturalSearchFailure.AI_RESPONSE_UNPARSEABLE, AI_UNPARSEABLE_MESSAGE
            )

        return NaturalSearchResult(
            success=True, params=params, message=build_message(params)
        )

    async def _nearest_airport(
        self, location: GeoLocation | None
    ) -> AirportCoordinates | None:
        if location is None:
            return None
        try:
            return await self._client.find_nearest_airport(
                location.lat,
                location.lng,
                max_distance_km=self._config.nearest_airport_radius_km,
            )
        except httpx.HTTPError as exc:
            logger.info("Nearest airport lookup failed: %s", exc)
            return None

    @staticmethod
    def _complete(
        parsed: ParsedQuery,
        departure_city: str,
        departure_code: str,
        now: dt.datetime,
    ) -> SearchParams:
        time_preference = parsed.time_preference
        if time_preference == TimePreference.ANY:
            time_preference = time_preference_for_hour(now.hour)

        return SearchParams(
            departure_city=departure_city,
            departure_city_code=departure_code,
            arrival_city=parsed.destination_city or parsed.destination_code,
            arrival_city_code=parsed.destination_code,
            date=parsed.date or now.date(),
            time_preference=time_preference,
            passengers=parsed.passengers,
            cabin_class=parsed.cabin_class,
            sort_by=parsed.sort_by,
            stops=parsed.stops,
            aircraft_type=parsed.aircraft_type,
            alliance=parsed.alliance,
            max_price=parsed.max_price,
            preferred_airlines=parsed.preferred_airlines,
        )
