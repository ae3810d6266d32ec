"""Form-based and multi-city flight search."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from airease_core.schemas import (
    CabinClass,
    PassengerCount,
    SearchHistoryCreate,
    SearchRequest,
    TripType,
)
from airease_ml.comparison import ComparisonAggregator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from airease_client.api import AireaseClient
    from airease_core.schemas import (
        FlightDetail,
        FlightSearchResponse,
        MultiCityLeg,
        ScoredFlight,
    )
    from airease_ml.comparison import ComparisonResult

logger = logging.getLogger(__name__)


class FlightSearchService:
    """Runs searches against the backend and compares the results."""

    def __init__(
        self,
        client: AireaseClient,
        aggregator: ComparisonAggregator | None = None,
    ) -> None:
        self._client = client
        self._aggregator = aggregator or ComparisonAggregator()

    async def search(
        self, request: SearchRequest, *, save_history: bool | None = None
    ) -> FlightSearchResponse:
        """Search one route.

        History is saved for signed-in users unless ``save_history`` says
        otherwise. A failed save is logged and never fails the search.
        """
        response = await self._client.search_flights(request)
        if save_history is None:
            save_history = self._client.authenticated
        if save_history:
            await self._save_history(request)
        return response

    async def search_multi_city(
        self,
        legs: Sequence[MultiCityLeg],
        *,
        cabin_class: CabinClass = CabinClass.ECONOMY,
        passengers: PassengerCount | None = None,
        currency: str = "USD",
    ) -> list[FlightSearchResponse]:
        """Search every leg concurrently; results follow the order of ``legs``.

        Any failing leg fails the whole query.
        """
        if not legs:
            msg = "Multi-city search needs at least one leg"
            raise ValueError(msg)

        passengers = passengers or PassengerCount()
        requests = [
            SearchRequest(
                origin=leg.origin,
                destination=leg.destination,
                departure_date=leg.departure_date,
                cabin_class=cabin_class,
                trip_type=TripType.MULTI_CITY,
                passengers=passengers,
                currency=currency,
            )
            for leg in legs
        ]
        logger.info("Searching %d multi-city legs", len(requests))
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self._client.search_flights(req))
                    for req in requests
                ]
        except ExceptionGroup as failed:
            # Remaining legs are cancelled; surface the first leg error
            raise failed.exceptions[0] from None
        return [task.result() for task in tasks]

    async def fetch_for_comparison(self, flight_ids: Sequence[str]) -> list[FlightDetail]:
        """Load the selected flights' details in parallel."""
        ComparisonAggregator.validate_ids(flight_ids)
        details = await asyncio.gather(
            *(self._client.get_flight_detail(fid) for fid in flight_ids)
        )
        return list(details)

    def compare(self, flights: Sequence[ScoredFlight]) -> ComparisonResult:
        return self._aggregator.compare(flights)

    async def _save_history(self, request: SearchRequest) -> None:
        entry = SearchHistoryCreate(
            departure_city=request.origin,
            arrival_city=request.destination,
            departure_date=request.departure_date,
            return_date=request.return_date,
            passengers=request.passengers.total,
            cabin_class=request.cabin_class.value,
        )
        try:
            await self._client.add_search_history(entry)
        except httpx.HTTPError as exc:
            logger.warning("Failed to save search history: %s", exc)
