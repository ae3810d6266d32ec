"""Tests for best-of flags and the ComparisonAggregator."""

from __future__ import annotations

import pytest

from airease_core.schemas import ComparisonMetric, FacilitiesInfo
from airease_ml.comparison import (
    ComparisonAggregator,
    best_of,
    best_overall_of,
    comparison_signature,
    metric_value,
)
from airease_ml.errors import InvalidComparisonSet


@pytest.fixture
def aggregator() -> ComparisonAggregator:
    return ComparisonAggregator()


class TestBestOf:
    def test_ties_are_all_best(self, make_scored):
        flights = [
            make_scored("A", price=199.0),
            make_scored("B", price=199.0),
            make_scored("C", price=250.0),
        ]
        assert best_of(ComparisonMetric.PRICE, flights) == {"A", "B"}

    def test_higher_is_better_for_scores(self, make_scored):
        flights = [make_scored("A", overall=6.5), make_scored("B", overall=8.1)]
        assert best_of("overall_score", flights) == {"B"}

    def test_lower_is_better_for_duration_and_stops(self, make_scored):
        flights = [
            make_scored("A", duration_minutes=300, stops=1),
            make_scored("B", duration_minutes=250, stops=2),
        ]
        assert best_of(ComparisonMetric.DURATION, flights) == {"B"}
        assert best_of(ComparisonMetric.STOPS, flights) == {"A"}

    def test_facility_requires_known_presence(self, make_scored):
        flights = [
            make_scored("A", facilities=FacilitiesInfo(has_wifi=True)),
            make_scored("B", facilities=FacilitiesInfo(has_wifi=None)),
            make_scored("C", facilities=FacilitiesInfo(has_wifi=False)),
        ]
        assert best_of(ComparisonMetric.WIFI, flights) == {"A"}

    def test_facility_may_have_no_winner(self, make_scored):
        flights = [make_scored("A"), make_scored("B")]
        assert best_of(ComparisonMetric.MEAL, flights) == frozenset()

    def test_singleton_is_neutral(self, make_scored):
        assert best_of(ComparisonMetric.PRICE, [make_scored("A")]) == frozenset()

    def test_best_price_round_trip(self, make_scored):
        flights = [
            make_scored("A", price=320.0),
            make_scored("B", price=180.0),
            make_scored("C", price=410.0),
        ]
        (best_id,) = best_of(ComparisonMetric.PRICE, flights)
        by_id = {f.flight.id: f for f in flights}
        assert metric_value(ComparisonMetric.PRICE, by_id[best_id]) == min(
            f.flight.price for f in flights
        )


class TestBestOverall:
    def test_cheapest_and_top_scored(self, make_scored):
        flights = [
            make_scored("A", price=150.0, overall=8.5),
            make_scored("B", price=300.0, overall=7.0),
        ]
        assert best_overall_of(flights) == {"A"}

    def test_no_flight_satisfies_both(self, make_scored):
        flights = [
            make_scored("A", price=150.0, overall=6.0),
            make_scored("B", price=300.0, overall=9.0),
        ]
        assert best_overall_of(flights) == frozenset()


class TestComparisonAggregator:
    def test_compare_three(self, aggregator, make_scored):
        flights = [
            make_scored("A", price=200, duration_minutes=300, stops=0, overall=8.0),
            make_scored("B", price=350, duration_minutes=250, stops=1, overall=7.0),
            make_scored("C", price=500, duration_minutes=400, stops=2, overall=6.0),
        ]
        result = aggregator.compare(flights)

        assert result.is_valid
        assert result.flight_ids == ("A", "B", "C")
        assert result.is_best(ComparisonMetric.PRICE, "A")
        assert result.is_best(ComparisonMetric.DURATION, "B")
        assert result.is_best_overall("A")
        assert result.relative["B"].duration_score == 10.0
        assert result.relative["C"].price_score == 2.0

    def test_signature_is_order_independent(self, aggregator, make_scored):
        a, b = make_scored("A"), make_scored("B")
        assert aggregator.compare([a, b]).signature == aggregator.compare([b, a]).signature
        assert comparison_signature([b, a]) == ("A", "B")

    @pytest.mark.parametrize("size", [0, 1])
    def test_fewer_than_two_is_neutral(self, aggregator, make_scored, size):
        flights = [make_scored(f"F{i}") for i in range(size)]
        result = aggregator.compare(flights)
        assert not result.is_valid
        assert result.best == {}
        assert result.best_overall == frozenset()
        assert result.relative == {}

    def test_more_than_three_rejected(self, aggregator, make_scored):
        flights = [make_scored(f"F{i}") for i in range(4)]
        with pytest.raises(InvalidComparisonSet) as exc_info:
            aggregator.compare(flights)
        assert exc_info.value.size == 4

    def test_duplicates_rejected(self, aggregator, make_scored):
        with pytest.raises(InvalidComparisonSet, match="duplicate"):
            aggregator.compare([make_scored("A"), make_scored("A")])

    def test_strict_validation(self, make_scored):
        with pytest.raises(InvalidComparisonSet):
            ComparisonAggregator.validate([make_scored("A")])
        ComparisonAggregator.validate([make_scored("A"), make_scored("B")])

    def test_does_not_mutate_input(self, aggregator, make_scored):
        flights = [make_scored("B"), make_scored("A")]
        snapshot = list(flights)
        aggregator.compare(flights)
        assert flights == snapshot
