"""Error taxonomy for scoring, comparison and query parsing."""

from __future__ import annotations


class AireaseError(Exception):
    """Base class for all AirEase domain errors."""


class InvalidComparisonSet(AireaseError, ValueError):  # noqa: N818
    """A comparison was requested for fewer than 2 or more than 3 flights."""

    def __init__(self, size: int, message: str | None = None) -> None:
        self.size = size
        super().__init__(
            message or f"Comparison needs 2 or 3 flights, got {size}"
        )


class WeightVectorInvalid(AireaseError, ValueError):  # noqa: N818
    """A persona weight vector failed validation."""


class AIParseError(AireaseError):
    """The AI provider did not yield usable search constraints."""


class ResponseTruncated(AIParseError):  # noqa: N818
    """The provider stopped at its token limit. Safe to retry."""


class AIResponseUnparseable(AIParseError):  # noqa: N818
    """The provider answered, but the answer holds no valid JSON object."""


class AIProviderUnavailable(AireaseError):  # noqa: N818
    """Transient provider failure (rate limit, overload, 5xx, connection)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AIRequestRejected(AireaseError):  # noqa: N818
    """The provider refused the request (bad key, bad request, no credentials).

    Retrying the same request cannot succeed.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
