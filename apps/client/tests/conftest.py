"""Shared fixtures for client tests: backend payloads and a mocked transport."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import httpx
import pytest

from airease_client.api import AireaseClient
from airease_core.schemas import ScoredFlight

BASE_URL = "http://backend.test"


@pytest.fixture
def make_flight_payload():
    """Factory fixture for one scored flight as the backend sends it (camelCase)."""

    def _make(
        flight_id: str = "F1",
        *,
        price: float = 200.0,
        duration_minutes: int = 300,
        stops: int = 0,
        overall: float = 7.5,
        airline: str = "Cathay Pacific",
        flight_number: str = "CX500",
        facilities: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        departure = datetime(2026, 11, 2, 9, 0)
        arrival = departure + timedelta(minutes=duration_minutes)
        return {
            "flight": {
                "id": flight_id,
                "airline": airline,
                "airlineCode": flight_number[:2],
                "flightNumber": flight_number,
                "departureCity": "Hong Kong",
                "arrivalCity": "Tokyo",
                "departureCityCode": "HKG",
                "arrivalCityCode": "NRT",
                "departureTime": departure.isoformat(),
                "arrivalTime": arrival.isoformat(),
                "durationMinutes": duration_minutes,
                "stops": stops,
                "price": price,
                "currency": "USD",
            },
            "score": {
                "overallScore": overall,
                "dimensions": {
                    "safety": 10.0,
                    "reliability": 8.0,
                    "comfort": 6.5,
                    "service": 7.0,
                    "value": 6.0,
                },
                "personaWeightsApplied": "default",
            },
            "facilities": facilities or {},
        }

    return _make


@pytest.fixture
def make_scored(make_flight_payload):
    """Factory fixture for ScoredFlight models built from backend payloads."""

    def _make(flight_id: str = "F1", **kwargs: Any) -> ScoredFlight:
        return ScoredFlight.model_validate(make_flight_payload(flight_id, **kwargs))

    return _make


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(requests_seen):
    """Factory fixture for an AireaseClient routed through ``handler``."""

    def _make(handler, *, token: str | None = "test-token") -> AireaseClient:
        def _record(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        return AireaseClient(
            base_url=BASE_URL, token=token, transport=httpx.MockTransport(_record)
        )

    return _make
