"""Flight scoring engine: normalizes raw flight attributes into 0-10 scores."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

from airease_core.schemas import (
    ComfortSpec,
    FacilitiesInfo,
    FactorScore,
    FlightQualityData,
    FlightRecord,
    FlightScore,
    IncidentHistory,
    Persona,
    RelativeScores,
    ScoreDimension,
    ScoreDimensions,
    ServiceRatings,
)
from airease_ml.weights import DEFAULT_TOLERANCE, validate_weights, weights_for

MIN_SCORE = 0.0
MAX_SCORE = 10.0


class ScoringConfig(BaseModel):
    """Scoring policy constants. Passed explicitly to each ``ScoreNormalizer``."""

    model_config = ConfigDict(frozen=True)

    # Safety: points deducted per recorded incident
    aircraft_incident_penalty: float = 1.0
    airline_incident_penalty: float = 0.3
    aircraft_type_incident_penalty: float = 0.15

    # Reliability: on-time rate band edges
    reliability_good_rate: float = 0.75
    reliability_excellent_rate: float = 0.90

    # Amenities: points per known-present facility
    amenity_points: float = 2.5

    # Comfort sub-weights (sum to 10) and thresholds
    comfort_pitch_weight: float = 4.0
    comfort_width_weight: float = 2.5
    comfort_recline_weight: float = 1.75
    comfort_age_weight: float = 1.75
    pitch_excellent_inches: float = 34.0
    pitch_good_inches: float = 32.0
    width_excellent_inches: float = 18.0
    width_good_inches: float = 17.0
    recline_excellent_inches: float = 5.0
    recline_good_inches: float = 3.0
    newer_aircraft_years: float = 10.0
    older_aircraft_years: float = 20.0

    # Service sub-weights (sum to 10); ratings are on a 0-5 scale
    service_rating_weight: float = 4.5
    service_food_weight: float = 3.0
    service_crew_weight: float = 2.5

    # Value sub-weights (sum to 10) and price-to-route-average ratios
    value_price_weight: float = 7.0
    value_service_weight: float = 3.0
    value_best_ratio: float = 0.8
    value_worst_ratio: float = 1.4

    # Relative scores
    duration_step_minutes: float = 30.0
    stops_multipliers: tuple[float, float, float] = (1.0, 0.8, 0.6)

    weight_tolerance: float = DEFAULT_TOLERANCE

    @model_validator(mode="after")
    def _validate_sub_weights(self) -> ScoringConfig:
        groups = {
            "comfort": (
                self.comfort_pitch_weight,
                self.comfort_width_weight,
                self.comfort_recline_weight,
                self.comfort_age_weight,
            ),
            "service": (
                self.service_rating_weight,
                self.service_food_weight,
                self.service_crew_weight,
            ),
            "value": (self.value_price_weight, self.value_service_weight),
        }
        for name, weights in groups.items():
            total = math.fsum(weights)
            if any(w < 0 for w in weights) or not math.isclose(total, MAX_SCORE):
                msg = f"{name} sub-weights must be non-negative and sum to 10, got {total}"
                raise ValueError(msg)
        if not 0 < self.reliability_good_rate < self.reliability_excellent_rate < 1:
            msg = "Reliability band edges must satisfy 0 < good < excellent < 1"
            raise ValueError(msg)
        if self.value_best_ratio >= self.value_worst_ratio:
            msg = "value_best_ratio must be below value_worst_ratio"
            raise ValueError(msg)
        if self.duration_step_minutes <= 0:
            msg = "duration_step_minutes must be positive"
            raise ValueError(msg)
        return self


DEFAULT_CONFIG = ScoringConfig()


class ScoreNormalizer:
    """Pure scoring functions parameterized by a ``ScoringConfig``.

    Absolute dimensions (safety, reliability, comfort, service, value,
    amenities) describe a single flight. Price, duration and efficiency are
    relative to the comparison set they are computed against and must be
    recomputed whenever that set changes.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> ScoringConfig:
        return self._config

    # ------------------------------------------------------------------
    # Relative scores
    # ------------------------------------------------------------------

    @staticmethod
    def score_price(price: float, comparison_prices: Sequence[float]) -> float:
        """Min-max inverse normalization into [2, 10]: cheapest=10, dearest=2."""
        if not comparison_prices:
            return MAX_SCORE
        min_price = min(comparison_prices)
        price_range = max(comparison_prices) - min_price
        if price_range == 0:
            return MAX_SCORE
        normalized = 1.0 - (price - min_price) / price_range
        return _clamp(2.0 + normalized * 8.0, 2.0, MAX_SCORE)

    def score_duration(
        self, duration_minutes: int, comparison_durations: Sequence[int]
    ) -> float:
        """Shortest flight = 10, minus 1 per step above the shortest, floor 1."""
        if not comparison_durations:
            return MAX_SCORE
        shortest = min(comparison_durations)
        if duration_minutes <= shortest:
            return MAX_SCORE
        penalty = (duration_minutes - shortest) / self._config.duration_step_minutes
        return _clamp(MAX_SCORE - penalty, 1.0, MAX_SCORE)

    @staticmethod
    def score_stops(stops: int) -> float:
        """Fixed tiers: direct=10, 1 stop=8, 2 stops=6, 3+=4."""
        if stops < 0:
            msg = f"stops must be >= 0, got {stops}"
            raise ValueError(msg)
        if stops == 0:
            return 10.0
        if stops == 1:
            return 8.0
        if stops == 2:
            return 6.0
        return 4.0

    def score_efficiency(self, duration_score: float, stops: int) -> float:
        """Duration score damped by a per-stop multiplier, clamped to [1, 10]."""
        multipliers = self._config.stops_multipliers
        multiplier = multipliers[min(stops, len(multipliers) - 1)]
        return _clamp(duration_score * multiplier, 1.0, MAX_SCORE)

    def relative_scores(
        self, flights: Sequence[FlightRecord]
    ) -> dict[str, RelativeScores]:
        """Compute price / duration / stops / efficiency for a comparison set."""
        prices = [f.price for f in flights]
        durations = [f.duration_minutes for f in flights]

        results: dict[str, RelativeScores] = {}
        for flight in flights:
            duration_score = self.score_duration(flight.duration_minutes, durations)
            results[flight.id] = RelativeScores(
                flight_id=flight.id,
                price_score=self.score_price(flight.price, prices),
                duration_score=duration_score,
                stops_score=self.score_stops(flight.stops),
                efficiency_score=self.score_efficiency(duration_score, flight.stops),
            )
        return results

    # ------------------------------------------------------------------
    # Absolute dimensions
    # ------------------------------------------------------------------

    def score_safety(self, history: IncidentHistory | None) -> float:
        """Start at 10 and deduct per incident. No history scores exactly 10."""
        if history is None:
            return MAX_SCORE
        cfg = self._config
        penalty = (
            history.aircraft_incidents * cfg.aircraft_incident_penalty
            + history.airline_incidents * cfg.airline_incident_penalty
            + history.aircraft_type_incidents * cfg.aircraft_type_incident_penalty
        )
        return _clamp(MAX_SCORE - penalty)

    def score_reliability(self, on_time_rate: float) -> float:
        """Piecewise-linear map of on-time rate into three score bands.

        ``>= excellent`` maps to [8, 10], ``[good, excellent)`` to [5, 8),
        anything lower to [0, 5).
        """
        if not 0.0 <= on_time_rate <= 1.0:
            msg = f"on_time_rate must be within [0, 1], got {on_time_rate}"
            raise ValueError(msg)
        good = self._config.reliability_good_rate
        excellent = self._config.reliability_excellent_rate

        if on_time_rate >= excellent:
            score = 8.0 + (on_time_rate - excellent) / (1.0 - excellent) * 2.0
        elif on_time_rate >= good:
            score = 5.0 + (on_time_rate - good) / (excellent - good) * 3.0
        else:
            score = on_time_rate / good * 5.0
        return _clamp(score)

    def score_comfort(
        self,
        seat_pitch: float | None = None,
        seat_width: float | None = None,
        recline: float | None = None,
        aircraft_age: float | None = None,
    ) -> FactorScore:
        """Weighted seat pitch, width, recline and aircraft age."""
        cfg = self._config
        return _weighted_sum(
            [
                (
                    "seat_pitch",
                    cfg.comfort_pitch_weight,
                    _tier_high(
                        seat_pitch,
                        cfg.pitch_excellent_inches,
                        cfg.pitch_good_inches,
                        middle=0.6,
                        low=0.2,
                    ),
                ),
                (
                    "seat_width",
                    cfg.comfort_width_weight,
                    _tier_high(
                        seat_width, cfg.width_excellent_inches, cfg.width_good_inches
                    ),
                ),
                (
                    "recline",
                    cfg.comfort_recline_weight,
                    _tier_high(
                        recline, cfg.recline_excellent_inches, cfg.recline_good_inches
                    ),
                ),
                (
                    "aircraft_age",
                    cfg.comfort_age_weight,
                    _tier_low(
                        aircraft_age, cfg.newer_aircraft_years, cfg.older_aircraft_years
                    ),
                ),
            ]
        )

    def score_service(
        self,
        rating: float | None = None,
        food_rating: float | None = None,
        crew_rating: float | None = None,
    ) -> FactorScore:
        """Weighted passenger ratings, each on a 0-5 scale."""
        cfg = self._config
        return _weighted_sum(
            [
                ("rating", cfg.service_rating_weight, _ratio(rating, 5.0)),
                ("food_rating", cfg.service_food_weight, _ratio(food_rating, 5.0)),
                ("crew_rating", cfg.service_crew_weight, _ratio(crew_rating, 5.0)),
            ]
        )

    def score_value(
        self,
        price: float,
        service_level: float | None = None,
        route_average_price: float | None = None,
    ) -> FactorScore:
        """Price against the route average, plus the service level (0-10) it buys."""
        cfg = self._config
        price_factor: float | None = None
        if route_average_price is not None and route_average_price > 0:
            ratio = price / route_average_price
            price_factor = _clamp(
                (cfg.value_worst_ratio - ratio)
                / (cfg.value_worst_ratio - cfg.value_best_ratio),
                0.0,
                1.0,
            )
        return _weighted_sum(
            [
                ("route_price", cfg.value_price_weight, price_factor),
                (
                    "service_level",
                    cfg.value_service_weight,
                    _ratio(service_level, MAX_SCORE),
                ),
            ]
        )

    def amenities_breakdown(self, facilities: FacilitiesInfo | None) -> FactorScore:
        """Amenity points with the list of known and unknown facilities."""
        flags = {
            "wifi": facilities.has_wifi if facilities else None,
            "power": facilities.has_power if facilities else None,
            "entertainment": facilities.has_ife if facilities else None,
            "meal": facilities.meal_included if facilities else None,
        }
        points = sum(self._config.amenity_points for v in flags.values() if v is True)
        return FactorScore(
            value=_clamp(points),
            available=tuple(k for k, v in flags.items() if v is not None),
            missing=tuple(k for k, v in flags.items() if v is None),
        )

    def score_amenities(self, facilities: FacilitiesInfo | None) -> float:
        """2.5 points each for wifi, power, entertainment and an included meal."""
        return self.amenities_breakdown(facilities).value

    def score_overall(
        self,
        dimensions: ScoreDimensions | Mapping[str, float],
        weights: Mapping[str, float],
    ) -> float:
        """Weighted sum of dimension scores.

        Raises:
            WeightVectorInvalid: If ``weights`` does not sum to 1.
        """
        validated = validate_weights(weights, self._config.weight_tolerance)
        terms: list[float] = []
        for dimension, weight in validated.items():
            value = dimensions.get(dimension.value)
            if value is None:
                msg = f"No score available for weighted dimension {dimension.value!r}"
                raise ValueError(msg)
            terms.append(weight * value)
        return _clamp(math.fsum(terms))

    # ------------------------------------------------------------------
    # Whole-flight scoring
    # ------------------------------------------------------------------

    def score_flight(
        self,
        flight: FlightRecord,
        facilities: FacilitiesInfo | None = None,
        quality: FlightQualityData | None = None,
        *,
        persona: Persona | str = Persona.DEFAULT,
        weights: Mapping[str, float] | None = None,
    ) -> FlightScore:
        """Score every absolute dimension of one flight and blend them.

        ``weights`` overrides the built-in vector for ``persona``.
        """
        quality = quality or FlightQualityData()
        comfort_spec = quality.comfort or ComfortSpec()
        ratings = quality.service or ServiceRatings()

        seat_pitch = comfort_spec.seat_pitch_inches
        if seat_pitch is None and facilities is not None:
            seat_pitch = facilities.seat_pitch_inches

        safety = FactorScore(
            value=self.score_safety(quality.incidents),
            available=("incidents",) if quality.incidents is not None else (),
            missing=() if quality.incidents is not None else ("incidents",),
        )
        if quality.on_time_rate is None:
            reliability = FactorScore(value=MIN_SCORE, missing=("on_time_rate",))
        else:
            reliability = FactorScore(
                value=self.score_reliability(quality.on_time_rate),
                available=("on_time_rate",),
            )
        comfort = self.score_comfort(
            seat_pitch=seat_pitch,
            seat_width=comfort_spec.seat_width_inches,
            recline=comfort_spec.recline_inches,
            aircraft_age=comfort_spec.aircraft_age_years,
        )
        service = self.score_service(
            rating=ratings.rating,
            food_rating=ratings.food_rating,
            crew_rating=ratings.crew_rating,
        )
        value = self.score_value(
            flight.price,
            service_level=service.value if service.has_data else None,
            route_average_price=quality.route_average_price,
        )
        amenities = self.amenities_breakdown(facilities)

        dimensions = ScoreDimensions(
            safety=safety.value,
            reliability=reliability.value,
            comfort=comfort.value,
            service=service.value,
            value=value.value,
            amenities=amenities.value,
        )
        if weights is None:
            weights = weights_for(persona)
            persona_label = _persona_label(persona)
        else:
            persona_label = "custom"

        return FlightScore(
            overall_score=self.score_overall(dimensions, weights),
            dimensions=dimensions,
            breakdown={
                ScoreDimension.SAFETY: safety,
                ScoreDimension.RELIABILITY: reliability,
                ScoreDimension.COMFORT: comfort,
                ScoreDimension.SERVICE: service,
                ScoreDimension.VALUE: value,
                ScoreDimension.AMENITIES: amenities,
            },
            persona=persona_label,
        )


def _clamp(value: float, low: float = MIN_SCORE, high: float = MAX_SCORE) -> float:
    """Clamp into [low, high]."""
    return max(low, min(high, value))


def _persona_label(persona: Persona | str) -> str:
    try:
        return Persona(persona).value
    except ValueError:
        return Persona.DEFAULT.value


def _ratio(value: float | None, scale: float) -> float | None:
    """Normalize ``value`` against ``scale`` into [0, 1]; ``None`` stays unknown."""
    if value is None:
        return None
    return _clamp(value / scale, 0.0, 1.0)


def _tier_high(
    value: float | None,
    excellent: float,
    good: float,
    *,
    middle: float = 0.5,
    low: float = 0.0,
) -> float | None:
    """Three-tier factor where larger is better."""
    if value is None:
        return None
    if value >= excellent:
        return 1.0
    if value >= good:
        return middle
    return low


def _tier_low(value: float | None, newer: float, older: float) -> float | None:
    """Three-tier factor where smaller is better (e.g. aircraft age)."""
    if value is None:
        return None
    if value < newer:
        return 1.0
    if value < older:
        return 0.5
    return 0.0


def _weighted_sum(factors: list[tuple[str, float, float | None]]) -> FactorScore:
    """Sum ``weight * factor`` over known factors; unknown ones contribute zero."""
    available = tuple(name for name, _, factor in factors if factor is not None)
    missing = tuple(name for name, _, factor in factors if factor is None)
    total = math.fsum(
        weight * factor for _, weight, factor in factors if factor is not None
    )
    return FactorScore(value=_clamp(total), available=available, missing=missing)
