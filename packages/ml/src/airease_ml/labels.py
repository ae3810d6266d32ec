"""Presentation conversions of 0-10 scores: tier labels and badge scaling."""

from __future__ import annotations

from enum import StrEnum


class Stage(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


EXCELLENT_THRESHOLD = 8.0
GOOD_THRESHOLD = 5.0

STAGE_LABELS: dict[str, dict[Stage, str]] = {
    "overall": {Stage.EXCELLENT: "Excellent", Stage.GOOD: "Good", Stage.FAIR: "Fair"},
    "stops": {Stage.EXCELLENT: "Direct", Stage.GOOD: "1 Stop", Stage.FAIR: "Multiple"},
    "duration": {Stage.EXCELLENT: "Short", Stage.GOOD: "Medium", Stage.FAIR: "Long"},
    "price": {Stage.EXCELLENT: "Budget", Stage.GOOD: "Moderate", Stage.FAIR: "Premium"},
    "safety": {Stage.EXCELLENT: "Excellent", Stage.GOOD: "Good", Stage.FAIR: "Concerns"},
    "reliability": {
        Stage.EXCELLENT: "Punctual",
        Stage.GOOD: "Reliable",
        Stage.FAIR: "Delays likely",
    },
    "comfort": {
        Stage.EXCELLENT: "Premium",
        Stage.GOOD: "Comfortable",
        Stage.FAIR: "Basic",
    },
    "service": {
        Stage.EXCELLENT: "Exceptional",
        Stage.GOOD: "Good",
        Stage.FAIR: "Basic",
    },
    "value": {
        Stage.EXCELLENT: "Great Value",
        Stage.GOOD: "Fair Value",
        Stage.FAIR: "Low Value",
    },
    "amenities": {
        Stage.EXCELLENT: "Full amenities",
        Stage.GOOD: "Partial amenities",
        Stage.FAIR: "Limited amenities",
    },
}


def stage_of(score: float) -> Stage:
    """Classify a 0-10 score into three tiers."""
    if score >= EXCELLENT_THRESHOLD:
        return Stage.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return Stage.GOOD
    return Stage.FAIR


def stage_label(dimension: str, score: float) -> str:
    """Dimension-specific wording for the tier of ``score``."""
    labels = STAGE_LABELS.get(dimension.lower(), STAGE_LABELS["overall"])
    return labels[stage_of(score)]


def to_display_score(score: float) -> int:
    """Badge integer on a 0-100 scale.

    Scores above 10 are assumed to already be on the 0-100 scale.
    """
    if score <= 10:
        return round(score * 10)
    return round(score)


def format_score(score: float) -> str:
    """One-decimal rendering used by tables and posters."""
    return f"{score:.1f}"
