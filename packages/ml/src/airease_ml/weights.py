"""Persona weight vectors for the overall score."""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType

from airease_core.schemas import Persona, ScoreDimension
from airease_ml.errors import WeightVectorInvalid

OVERALL_DIMENSIONS: tuple[ScoreDimension, ...] = (
    ScoreDimension.SAFETY,
    ScoreDimension.RELIABILITY,
    ScoreDimension.COMFORT,
    ScoreDimension.SERVICE,
    ScoreDimension.VALUE,
)

DEFAULT_TOLERANCE = 1e-6

PERSONA_WEIGHTS: Mapping[Persona, Mapping[ScoreDimension, float]] = MappingProxyType(
    {
        Persona.DEFAULT: MappingProxyType(
            {
                ScoreDimension.SAFETY: 0.20,
                ScoreDimension.RELIABILITY: 0.30,
                ScoreDimension.COMFORT: 0.20,
                ScoreDimension.SERVICE: 0.15,
                ScoreDimension.VALUE: 0.15,
            }
        ),
        Persona.BUSINESS: MappingProxyType(
            {
                ScoreDimension.SAFETY: 0.15,
                ScoreDimension.RELIABILITY: 0.35,
                ScoreDimension.COMFORT: 0.25,
                ScoreDimension.SERVICE: 0.20,
                ScoreDimension.VALUE: 0.05,
            }
        ),
        Persona.FAMILY: MappingProxyType(
            {
                ScoreDimension.SAFETY: 0.30,
                ScoreDimension.RELIABILITY: 0.20,
                ScoreDimension.COMFORT: 0.20,
                ScoreDimension.SERVICE: 0.15,
                ScoreDimension.VALUE: 0.15,
            }
        ),
        Persona.STUDENT: MappingProxyType(
            {
                ScoreDimension.SAFETY: 0.15,
                ScoreDimension.RELIABILITY: 0.20,
                ScoreDimension.COMFORT: 0.10,
                ScoreDimension.SERVICE: 0.05,
                ScoreDimension.VALUE: 0.50,
            }
        ),
        Persona.BUDGET: MappingProxyType(
            {
                ScoreDimension.SAFETY: 0.20,
                ScoreDimension.RELIABILITY: 0.15,
                ScoreDimension.COMFORT: 0.05,
                ScoreDimension.SERVICE: 0.05,
                ScoreDimension.VALUE: 0.55,
            }
        ),
    }
)


def validate_weights(
    weights: Mapping[str, float],
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[ScoreDimension, float]:
    """Check a weight vector and return it keyed by ``ScoreDimension``.

    The vector must use only overall dimensions, hold no negative weights and
    sum to 1 within ``tolerance``. It is never renormalized.

    Raises:
        WeightVectorInvalid: On any violation.
    """
    if not weights:
        msg = "Weight vector is empty"
        raise WeightVectorInvalid(msg)

    validated: dict[ScoreDimension, float] = {}
    for key, weight in weights.items():
        try:
            dimension = ScoreDimension(key)
        except ValueError:
            msg = f"Unknown score dimension in weight vector: {key!r}"
            raise WeightVectorInvalid(msg) from None
        if dimension not in OVERALL_DIMENSIONS:
            msg = f"Dimension {dimension.value!r} does not contribute to the overall score"
            raise WeightVectorInvalid(msg)
        if not math.isfinite(weight) or weight < 0:
            msg = f"Weight for {dimension.value!r} must be a non-negative number, got {weight}"
            raise WeightVectorInvalid(msg)
        validated[dimension] = float(weight)

    total = math.fsum(validated.values())
    if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=tolerance):
        msg = f"Weights must sum to 1.0 (got {total:.6f}): {dict(weights)}"
        raise WeightVectorInvalid(msg)
    return validated


def weights_for(persona: Persona | str) -> dict[ScoreDimension, float]:
    """Return a copy of the built-in weight vector for ``persona``.

    Unknown personas fall back to the default profile.
    """
    try:
        key = Persona(persona)
    except ValueError:
        key = Persona.DEFAULT
    return dict(PERSONA_WEIGHTS[key])
