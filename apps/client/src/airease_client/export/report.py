"""Data contract of a comparison document.

Everything here is read from ``ScoredFlight`` and ``ComparisonResult``
objects; nothing is recomputed. Numbers stay exact floats until the
renderer formats them.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from airease_core.schemas import ComparisonMetric
from airease_ml.comparison import (
    ComparisonAggregator,
    comparison_signature,
    metric_value,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from airease_core.schemas import FacilitiesInfo, ScoredFlight
    from airease_ml.comparison import ComparisonResult

DIMENSION_ROWS: tuple[tuple[ComparisonMetric, str], ...] = (
    (ComparisonMetric.OVERALL_SCORE, "Overall Score"),
    (ComparisonMetric.SAFETY, "Safety"),
    (ComparisonMetric.RELIABILITY, "Reliability"),
    (ComparisonMetric.COMFORT, "Comfort"),
    (ComparisonMetric.SERVICE, "Service"),
    (ComparisonMetric.VALUE, "Value"),
)

YES, NO, UNKNOWN = "Yes", "No", "n/a"


class FlightCard(BaseModel):
    """Headline summary for one compared flight."""

    model_config = ConfigDict(frozen=True)

    flight_id: str
    airline: str
    flight_number: str
    route: str
    departure_time: dt.datetime
    arrival_time: dt.datetime
    overall_score: float
    price: float
    currency: str
    duration_minutes: int
    stops: int
    is_best_overall: bool = False
    is_lowest_price: bool = False
    is_shortest: bool = False


class DimensionRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric: ComparisonMetric
    label: str
    values: tuple[float | None, ...]
    best: tuple[bool, ...]


class AmenityRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    values: tuple[str, ...]


class ComparisonReport(BaseModel):
    """Cards, score table and amenities table for 2-3 flights."""

    model_config = ConfigDict(frozen=True)

    title: str = "AirEase Flight Comparison"
    generated_at: dt.datetime
    signature: tuple[str, ...]
    cards: tuple[FlightCard, ...]
    dimension_rows: tuple[DimensionRow, ...]
    amenity_rows: tuple[AmenityRow, ...]


def _flag(value: bool | None, detail: str | None = None) -> str:
    if value is None:
        return UNKNOWN
    if not value:
        return NO
    return detail or YES


def _amenity_rows(facilities: Sequence[FacilitiesInfo]) -> tuple[AmenityRow, ...]:
    def row(label: str, render: Callable[[FacilitiesInfo], str]) -> AmenityRow:
        return AmenityRow(label=label, values=tuple(render(f) for f in facilities))

    return (
        row("WiFi", lambda f: _flag(f.has_wifi)),
        row("Power Outlets", lambda f: _flag(f.has_power)),
        row("Entertainment", lambda f: _flag(f.has_ife, f.ife_type)),
        row(
            "Seat Pitch",
            lambda f: f'{f.seat_pitch_inches:g}"'
            if f.seat_pitch_inches is not None
            else UNKNOWN,
        ),
        row("Meals", lambda f: _flag(f.meal_included, f.meal_type)),
    )


def build_comparison_report(
    result: ComparisonResult,
    flights: Sequence[ScoredFlight],
    *,
    generated_at: dt.datetime | None = None,
) -> ComparisonReport:
    """Assemble the report for ``flights`` from an existing comparison.

    Raises:
        InvalidComparisonSet: Fewer than 2 or more than 3 flights.
        ValueError: ``result`` was computed for a different set of flights.
    """
    ComparisonAggregator.validate(flights)
    if result.signature != comparison_signature(flights):
        msg = "Comparison result does not belong to these flights"
        raise ValueError(msg)

    cards = tuple(
        FlightCard(
            flight_id=sf.flight.id,
            airline=sf.flight.airline,
            flight_number=sf.flight.flight_number,
            route=sf.flight.route,
            departure_time=sf.flight.departure_time,
            arrival_time=sf.flight.arrival_time,
            overall_score=sf.score.overall_score,
            price=sf.flight.price,
            currency=sf.flight.currency,
            duration_minutes=sf.flight.duration_minutes,
            stops=sf.flight.stops,
            is_best_overall=result.is_best_overall(sf.flight.id),
            is_lowest_price=result.is_best(ComparisonMetric.PRICE, sf.flight.id),
            is_shortest=result.is_best(ComparisonMetric.DURATION, sf.flight.id),
        )
        for sf in flights
    )
    dimension_rows = tuple(
        DimensionRow(
            metric=metric,
            label=label,
            values=tuple(metric_value(metric, sf) for sf in flights),
            best=tuple(result.is_best(metric, sf.flight.id) for sf in flights),
        )
        for metric, label in DIMENSION_ROWS
    )
    return ComparisonReport(
        generated_at=generated_at or dt.datetime.now(),
        signature=result.signature,
        cards=cards,
        dimension_rows=dimension_rows,
        amenity_rows=_amenity_rows([sf.facilities for sf in flights]),
    )
