"""Score DTOs produced by the scoring engine and read by every renderer."""

from __future__ import annotations

from pydantic import Field

from .base import WireModel
from .enums import Persona, ScoreDimension
from .flight import FacilitiesInfo, FlightRecord


class FactorScore(WireModel):
    """A dimension value together with the sub-factors it was built from."""

    value: float = Field(ge=0, le=10)
    available: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()

    @property
    def has_data(self) -> bool:
        """False means "insufficient data", not "scored zero"."""
        return bool(self.available)


class ScoreDimensions(WireModel):
    """Absolute per-flight dimension scores on a 0-10 scale."""

    safety: float = Field(default=10.0, ge=0, le=10)
    reliability: float = Field(ge=0, le=10)
    comfort: float = Field(ge=0, le=10)
    service: float = Field(ge=0, le=10)
    value: float = Field(ge=0, le=10)
    amenities: float | None = Field(default=None, ge=0, le=10)

    def get(self, dimension: ScoreDimension | str) -> float | None:
        return getattr(self, ScoreDimension(dimension).value)


class FlightScore(WireModel):
    """Overall score plus its dimensional breakdown."""

    overall_score: float = Field(ge=0, le=10)
    dimensions: ScoreDimensions
    breakdown: dict[ScoreDimension, FactorScore] = Field(default_factory=dict)
    persona: str = Field(default=Persona.DEFAULT.value, alias="personaWeightsApplied")


class ScoredFlight(WireModel):
    """The unit that is listed, compared, exported and tracked."""

    flight: FlightRecord
    score: FlightScore
    facilities: FacilitiesInfo = Field(default_factory=FacilitiesInfo)


class RelativeScores(WireModel):
    """Scores that only make sense within the current comparison set."""

    flight_id: str
    price_score: float = Field(ge=2, le=10)
    duration_score: float = Field(ge=1, le=10)
    stops_score: float = Field(ge=4, le=10)
    efficiency_score: float = Field(ge=1, le=10)
