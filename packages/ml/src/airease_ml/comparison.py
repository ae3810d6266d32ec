"""Side-by-side comparison of 2-3 scored flights."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from airease_core.schemas import ComparisonMetric, RelativeScores, ScoredFlight
from airease_ml.errors import InvalidComparisonSet
from airease_ml.scoring import ScoreNormalizer

if TYPE_CHECKING:
    from airease_core.schemas import FlightRecord

logger = logging.getLogger(__name__)

MIN_COMPARE_FLIGHTS = 2
MAX_COMPARE_FLIGHTS = 3

# Numeric metrics: (getter, higher_is_better)
_NUMERIC_METRICS: dict[ComparisonMetric, tuple[Callable[[ScoredFlight], float], bool]] = {
    ComparisonMetric.OVERALL_SCORE: (lambda f: f.score.overall_score, True),
    ComparisonMetric.PRICE: (lambda f: f.flight.price, False),
    ComparisonMetric.DURATION: (lambda f: f.flight.duration_minutes, False),
    ComparisonMetric.STOPS: (lambda f: f.flight.stops, False),
    ComparisonMetric.SAFETY: (lambda f: f.score.dimensions.safety, True),
    ComparisonMetric.RELIABILITY: (lambda f: f.score.dimensions.reliability, True),
    ComparisonMetric.COMFORT: (lambda f: f.score.dimensions.comfort, True),
    ComparisonMetric.SERVICE: (lambda f: f.score.dimensions.service, True),
    ComparisonMetric.VALUE: (lambda f: f.score.dimensions.value, True),
}

# Facility metrics: a flight is best when the facility is known to be present
_FACILITY_METRICS: dict[ComparisonMetric, Callable[[ScoredFlight], bool | None]] = {
    ComparisonMetric.WIFI: lambda f: f.facilities.has_wifi,
    ComparisonMetric.POWER: lambda f: f.facilities.has_power,
    ComparisonMetric.ENTERTAINMENT: lambda f: f.facilities.has_ife,
    ComparisonMetric.MEAL: lambda f: f.facilities.meal_included,
}


def comparison_signature(flights: Sequence[ScoredFlight | FlightRecord]) -> tuple[str, ...]:
    """Order-independent identity of a comparison set."""
    return tuple(sorted(_flight_id(f) for f in flights))


def metric_value(metric: ComparisonMetric, flight: ScoredFlight) -> float | bool | None:
    """The raw value a metric compares for ``flight``."""
    if metric in _NUMERIC_METRICS:
        getter, _ = _NUMERIC_METRICS[metric]
        return getter(flight)
    return _FACILITY_METRICS[metric](flight)


def best_of(metric: ComparisonMetric | str, flights: Sequence[ScoredFlight]) -> frozenset[str]:
    """Ids of every flight holding the best value for ``metric``.

    Ties are all marked best. Numeric metrics always have at least one winner
    when 2+ flights are given; facility metrics may have none. Fewer than 2
    flights yield an empty set, since a comparison is undefined.
    """
    metric = ComparisonMetric(metric)
    if len(flights) < MIN_COMPARE_FLIGHTS:
        return frozenset()

    if metric in _FACILITY_METRICS:
        getter = _FACILITY_METRICS[metric]
        return frozenset(f.flight.id for f in flights if getter(f) is True)

    getter, higher_is_better = _NUMERIC_METRICS[metric]
    values = [getter(f) for f in flights]
    target = max(values) if higher_is_better else min(values)
    return frozenset(
        f.flight.id
        for f, value in zip(flights, values, strict=True)
        if _ties(value, target)
    )


class ComparisonResult(BaseModel):
    """Best-of flags and relative scores for one comparison set."""

    model_config = ConfigDict(frozen=True)

    signature: tuple[str, ...]
    flight_ids: tuple[str, ...]
    best: dict[ComparisonMetric, frozenset[str]] = Field(default_factory=dict)
    best_overall: frozenset[str] = frozenset()
    relative: dict[str, RelativeScores] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """False when fewer than 2 flights were given."""
        return len(self.flight_ids) >= MIN_COMPARE_FLIGHTS

    def is_best(self, metric: ComparisonMetric | str, flight_id: str) -> bool:
        return flight_id in self.best.get(ComparisonMetric(metric), frozenset())

    def is_best_overall(self, flight_id: str) -> bool:
        return flight_id in self.best_overall


class ComparisonAggregator:
    """Computes best-of flags across the flights currently being compared."""

    def __init__(self, normalizer: ScoreNormalizer | None = None) -> None:
        self._normalizer = normalizer or ScoreNormalizer()

    @staticmethod
    def validate(flights: Sequence[ScoredFlight]) -> None:
        """Raise ``InvalidComparisonSet`` unless 2 or 3 distinct flights are given."""
        ComparisonAggregator.validate_ids([f.flight.id for f in flights])

    @staticmethod
    def validate_ids(flight_ids: Sequence[str]) -> None:
        size = len(flight_ids)
        if not MIN_COMPARE_FLIGHTS <= size <= MAX_COMPARE_FLIGHTS:
            raise InvalidComparisonSet(size)
        if len(set(flight_ids)) != size:
            raise InvalidComparisonSet(size, "Comparison set contains duplicate flights")

    def compare(self, flights: Sequence[ScoredFlight]) -> ComparisonResult:
        """Aggregate best-of flags for the set.

        Fewer than 2 flights produce a neutral result with no flags. More than
        3 flights, or duplicates, raise ``InvalidComparisonSet``.
        """
        flight_ids = tuple(f.flight.id for f in flights)
        signature = comparison_signature(flights)
        if len(flights) < MIN_COMPARE_FLIGHTS:
            logger.debug("Comparison undefined for %d flight(s)", len(flights))
            return ComparisonResult(signature=signature, flight_ids=flight_ids)

        self.validate(flights)

        best = {metric: best_of(metric, flights) for metric in ComparisonMetric}
        best_overall = best_overall_of(flights)
        relative = self._normalizer.relative_scores([f.flight for f in flights])

        return ComparisonResult(
            signature=signature,
            flight_ids=flight_ids,
            best=best,
            best_overall=best_overall,
            relative=relative,
        )


def best_overall_of(flights: Sequence[ScoredFlight]) -> frozenset[str]:
    """Flights that are both the cheapest and the highest scored.

    Empty when no single flight satisfies both conditions.
    """
    cheapest = best_of(ComparisonMetric.PRICE, flights)
    top_scored = best_of(ComparisonMetric.OVERALL_SCORE, flights)
    return cheapest & top_scored


def _ties(value: float, target: float) -> bool:
    return math.isclose(value, target, rel_tol=1e-12, abs_tol=1e-9)


def _flight_id(flight: ScoredFlight | FlightRecord) -> str:
    if isinstance(flight, ScoredFlight):
        return flight.flight.id
    return flight.id
