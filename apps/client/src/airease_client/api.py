"""HTTP client for the AirEase backend REST API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from airease_client.config import settings
from airease_core.schemas import (
    AirportCoordinates,
    FlightDetail,
    FlightSearchResponse,
    PriceHistory,
    SearchHistoryItem,
    UserPreferences,
)

if TYPE_CHECKING:
    from airease_core.schemas import SearchHistoryCreate, SearchRequest, TrackingEvent

logger = logging.getLogger(__name__)


class AireaseClient:
    """Thin async wrapper around the backend ``/v1`` endpoints.

    Errors surface as ``httpx.HTTPStatusError`` / ``httpx.TransportError``.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        token = token if token is not None else settings.api_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.authenticated = bool(token)
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout or settings.api_timeout),
            transport=transport,
        )

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    # ------------------------------------------------------------------
    # Flights
    # ------------------------------------------------------------------

    async def search_flights(self, request: SearchRequest) -> FlightSearchResponse:
        """Call ``GET /v1/flights/search``."""
        data = await self._get("/v1/flights/search", params=request.to_query_params())
        response = FlightSearchResponse.model_validate(data)
        logger.debug(
            "Search %s -> %s returned %d flights",
            request.origin,
            request.destination,
            len(response.flights),
        )
        return response

    async def get_flight_detail(self, flight_id: str) -> FlightDetail:
        """Call ``GET /v1/flights/{id}``."""
        return FlightDetail.model_validate(await self._get(f"/v1/flights/{flight_id}"))

    async def get_price_history(self, flight_id: str) -> PriceHistory:
        return PriceHistory.model_validate(
            await self._get(f"/v1/flights/{flight_id}/price-history")
        )

    async def get_seatmap(self, flight_id: str) -> dict[str, Any]:
        """Seat map payload, passed through unparsed."""
        data: dict[str, Any] = await self._get(f"/v1/seatmap/{flight_id}")
        return data

    # ------------------------------------------------------------------
    # Airports
    # ------------------------------------------------------------------

    async def find_nearest_airport(
        self, lat: float, lng: float, max_distance_km: float = 100
    ) -> AirportCoordinates:
        """Nearest airport to a GPS position. 404 when none is in range."""
        data = await self._get(
            "/v1/airports/nearest",
            params={"lat": lat, "lng": lng, "max_distance_km": max_distance_km},
        )
        return AirportCoordinates.model_validate(data)

    async def get_airport_coordinates(self, iata_code: str) -> AirportCoordinates:
        return AirportCoordinates.model_validate(
            await self._get(f"/v1/airports/coordinates/{iata_code}")
        )

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    async def get_search_history(self) -> list[SearchHistoryItem]:
        data = await self._get("/v1/users/search-history")
        return [SearchHistoryItem.model_validate(item) for item in data]

    async def add_search_history(self, entry: SearchHistoryCreate) -> SearchHistoryItem:
        resp = await self._client.post(
            "/v1/users/search-history", json=entry.model_dump(mode="json")
        )
        resp.raise_for_status()
        return SearchHistoryItem.model_validate(resp.json())

    async def delete_search_history(self, item_id: int) -> None:
        resp = await self._client.delete(f"/v1/users/search-history/{item_id}")
        resp.raise_for_status()

    async def clear_search_history(self) -> None:
        resp = await self._client.delete("/v1/users/search-history")
        resp.raise_for_status()

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    async def post_event(self, event: TrackingEvent) -> None:
        """POST one tracking event. Callers decide what to do with failures."""
        resp = await self._client.post(event.path, json=event.model_dump(mode="json"))
        resp.raise_for_status()

    async def get_my_preferences(self) -> UserPreferences:
        return UserPreferences.model_validate(
            await self._get("/v1/preferences/my-preferences")
        )

    async def clear_preferences(self) -> None:
        resp = await self._client.delete("/v1/preferences/clear")
        resp.raise_for_status()

    async def close(self) -> None:
        """Shut down the underlying HTTPX client."""
        await self._client.aclose()
