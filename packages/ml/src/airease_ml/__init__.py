"""AirEase ML - flight scoring, comparison and query parsing."""

from airease_ml.comparison import (
    ComparisonAggregator,
    ComparisonResult,
    best_of,
    best_overall_of,
    comparison_signature,
)
from airease_ml.errors import (
    AIParseError,
    AIProviderUnavailable,
    AIRequestRejected,
    AIResponseUnparseable,
    AireaseError,
    InvalidComparisonSet,
    ResponseTruncated,
    WeightVectorInvalid,
)
from airease_ml.nlp import ParsedQuery, parse_natural_query
from airease_ml.scoring import ScoreNormalizer, ScoringConfig
from airease_ml.weights import PERSONA_WEIGHTS, validate_weights, weights_for

__all__ = [
    "PERSONA_WEIGHTS",
    "AIParseError",
    "AIProviderUnavailable",
    "AIRequestRejected",
    "AIResponseUnparseable",
    "AireaseError",
    "ComparisonAggregator",
    "ComparisonResult",
    "InvalidComparisonSet",
    "ParsedQuery",
    "ResponseTruncated",
    "ScoreNormalizer",
    "ScoringConfig",
    "WeightVectorInvalid",
    "best_of",
    "best_overall_of",
    "comparison_signature",
    "parse_natural_query",
    "validate_weights",
    "weights_for",
]
