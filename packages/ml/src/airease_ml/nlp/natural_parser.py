"""Natural language parser for flight search queries using Claude."""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from typing import Any

import anthropic
from pydantic import ValidationError

from airease_ml.errors import (
    AIProviderUnavailable,
    AIRequestRejected,
    AIResponseUnparseable,
    ResponseTruncated,
)
from airease_ml.nlp.constraint_schema import ParsedQuery
from airease_ml.nlp.prompts import SYSTEM_PROMPT, build_user_prompt
from airease_ml.retry import BackoffPolicy, retry_call

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5"
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TRUNCATION_ATTEMPTS = 3

# Rate limiting and overload responses worth retrying
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504, 529})

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from a response that may be wrapped in prose or fences."""
    candidate = text.strip()
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        match = _FENCE_RE.search(candidate)
        if match:
            candidate = match.group(1).strip()
        obj = _OBJECT_RE.search(candidate)
        if obj is None:
            msg = f"No JSON object in AI response: {text[:200]!r}"
            raise AIResponseUnparseable(msg) from None
        try:
            data = json.loads(obj.group(0))
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in AI response: {exc}"
            raise AIResponseUnparseable(msg) from exc

    if not isinstance(data, dict):
        msg = f"AI response JSON is a {type(data).__name__}, expected an object"
        raise AIResponseUnparseable(msg)
    return data


def _response_text(response: Any) -> str:
    """Concatenate every text block of a Messages API response."""
    return "".join(
        getattr(block, "text", "") or ""
        for block in response.content
        if getattr(block, "type", "text") == "text"
    )


async def _create_message(client: anthropic.AsyncAnthropic, **kwargs: Any) -> Any:
    """Call the Messages API, mapping transient failures to ``AIProviderUnavailable``."""
    try:
        return await client.messages.create(**kwargs)
    except anthropic.APIStatusError as exc:
        if exc.status_code in TRANSIENT_STATUS_CODES:
            msg = f"AI provider returned {exc.status_code}"
            raise AIProviderUnavailable(msg, status_code=exc.status_code) from exc
        msg = f"AI provider rejected the request ({exc.status_code}): {exc}"
        raise AIRequestRejected(msg, status_code=exc.status_code) from exc
    except anthropic.APIConnectionError as exc:
        msg = f"AI provider unreachable: {exc}"
        raise AIProviderUnavailable(msg) from exc


async def _parse_once(
    client: anthropic.AsyncAnthropic,
    query: str,
    *,
    today: str,
    model: str,
    max_tokens: int,
    policy: BackoffPolicy,
) -> ParsedQuery:
    response = await retry_call(
        _create_message,
        client,
        policy=policy,
        exceptions=(AIProviderUnavailable,),
        model=model,
        temperature=0,
        max_tokens=max_tokens,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": build_user_prompt(query, today)}],
    )

    if response.stop_reason == "max_tokens":
        msg = "AI response truncated at the token limit"
        raise ResponseTruncated(msg)

    text = _response_text(response)
    if not text:
        msg = "Empty response from AI"
        raise AIResponseUnparseable(msg)

    data = _extract_json(text)
    try:
        return ParsedQuery.model_validate(data)
    except ValidationError as exc:
        msg = f"AI response does not match the constraint schema: {exc}"
        raise AIResponseUnparseable(msg) from exc


async def parse_natural_query(
    query: str,
    *,
    client: anthropic.AsyncAnthropic | None = None,
    api_key: str | None = None,
    today: str | None = None,
    model: str = DEFAULT_MODEL,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    policy: BackoffPolicy | None = None,
    truncation_attempts: int = DEFAULT_TRUNCATION_ATTEMPTS,
) -> ParsedQuery:
    """Parse a natural language flight search query into structured constraints.

    Transient provider errors are retried with exponential backoff per
    ``policy``. A truncated response is re-requested up to
    ``truncation_attempts`` times in total. Unparseable answers are not
    retried.

    Args:
        query: Natural language search query.
        client: Anthropic client to use. Built from ``api_key`` when omitted.
        api_key: Anthropic API key.
        today: Today's date as YYYY-MM-DD. Defaults to the local date.
        model: Model name.
        max_tokens: Output token limit per request.
        policy: Backoff policy for transient provider errors.
        truncation_attempts: Total attempts when responses are truncated.

    Returns:
        Parsed constraints. The destination may still be missing.

    Raises:
        AIProviderUnavailable: Transient errors persisted past the retry ceiling.
        ResponseTruncated: Every attempt was truncated.
        AIResponseUnparseable: The answer holds no usable JSON object.
        AIRequestRejected: The provider refused the request, or no
            credentials are configured. Never retried.
    """
    if today is None:
        today = date.today().isoformat()
    if client is None:
        # Backoff is handled here, not by the SDK
        client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        if client.api_key is None and client.auth_token is None:
            msg = "No Anthropic API key configured"
            raise AIRequestRejected(msg)
    policy = policy or BackoffPolicy()

    last_error: ResponseTruncated | None = None
    for attempt in range(1, truncation_attempts + 1):
        try:
            return await _parse_once(
                client,
                query,
                today=today,
                model=model,
                max_tokens=max_tokens,
                policy=policy,
            )
        except ResponseTruncated as exc:
            last_error = exc
            logger.warning(
                "AI parse attempt %d/%d truncated, retrying",
                attempt,
                truncation_attempts,
            )

    msg = f"AI response truncated on all {truncation_attempts} attempts"
    raise ResponseTruncated(msg) from last_error
