"""NLP module for natural language flight search parsing."""

from __future__ import annotations

from airease_ml.nlp.constraint_schema import ParsedQuery
from airease_ml.nlp.natural_parser import parse_natural_query

__all__ = ["ParsedQuery", "parse_natural_query"]
