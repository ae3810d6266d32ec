"""Shared fixtures for scoring and comparison tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from airease_core.schemas import (
    FacilitiesInfo,
    FlightRecord,
    FlightScore,
    ScoreDimensions,
    ScoredFlight,
)
from airease_ml.scoring import ScoreNormalizer


@pytest.fixture
def normalizer() -> ScoreNormalizer:
    return ScoreNormalizer()


@pytest.fixture
def make_flight():
    """Factory fixture for FlightRecord instances."""

    def _make(
        flight_id: str = "F1",
        *,
        price: float = 200.0,
        duration_minutes: int = 300,
        stops: int = 0,
        airline: str = "Cathay Pacific",
        airline_code: str = "CX",
        flight_number: str = "CX500",
    ) -> FlightRecord:
        departure = datetime(2026, 11, 2, 9, 0)
        return FlightRecord(
            id=flight_id,
            airline=airline,
            airline_code=airline_code,
            flight_number=flight_number,
            departure_city="Hong Kong",
            arrival_city="Tokyo",
            departure_city_code="HKG",
            arrival_city_code="NRT",
            departure_time=departure,
            arrival_time=departure + timedelta(minutes=duration_minutes),
            duration_minutes=duration_minutes,
            stops=stops,
            price=price,
        )

    return _make


@pytest.fixture
def make_scored(make_flight):
    """Factory fixture for ScoredFlight instances with fixed scores."""

    def _make(
        flight_id: str = "F1",
        *,
        overall: float = 7.0,
        price: float = 200.0,
        duration_minutes: int = 300,
        stops: int = 0,
        safety: float = 10.0,
        reliability: float = 7.0,
        comfort: float = 6.0,
        service: float = 6.0,
        value: float = 6.0,
        facilities: FacilitiesInfo | None = None,
    ) -> ScoredFlight:
        return ScoredFlight(
            flight=make_flight(
                flight_id,
                price=price,
                duration_minutes=duration_minutes,
                stops=stops,
            ),
            score=FlightScore(
                overall_score=overall,
                dimensions=ScoreDimensions(
                    safety=safety,
                    reliability=reliability,
                    comfort=comfort,
                    service=service,
                    value=value,
                ),
            ),
            facilities=facilities or FacilitiesInfo(),
        )

    return _make
