"""
Resilient parsing of free-form model replies.

The reply is expected to embed one JSON object. The span from the first ``{`` to
the last ``}`` is decoded; anything unusable degrades to a HOLD verdict instead of
raising.
"""

from __future__ import annotations

import json
import math
import re
from enum import Enum
from typing import Any, TypeVar

from forexa.core.models import ModelVerdict, PredictionTimeframe, RiskLevel, TradeAction

PARSING_ERROR_REASONING = "Error parsing AI response"
DEFAULT_CONFIDENCE = 0.5

FALLBACK_NO_JSON = "no_json"
FALLBACK_DECODE_ERROR = "decode_error"

_JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)

E = TypeVar("E", bound=Enum)


def parse_model_response(text: str) -> ModelVerdict:
    """Recover a :class:`ModelVerdict` from raw model text. Never raises."""

    match = _JSON_SPAN.search(text)
    if match is None:
        if "{" in text:
            # an object was opened but never closed
            return fallback_verdict(PARSING_ERROR_REASONING, FALLBACK_DECODE_ERROR)
        return fallback_verdict(text, FALLBACK_NO_JSON)

    try:
        decoded = json.loads(match.group(0))
    except ValueError:
        return fallback_verdict(PARSING_ERROR_REASONING, FALLBACK_DECODE_ERROR)
    if not isinstance(decoded, dict):
        return fallback_verdict(PARSING_ERROR_REASONING, FALLBACK_DECODE_ERROR)

    action = decoded.get("prediction", decoded.get("action"))
    reasoning = decoded.get("reasoning")
    return ModelVerdict(
        action=coerce_enum(action, TradeAction, TradeAction.HOLD),
        confidence=coerce_confidence(decoded.get("confidence")),
        reasoning="" if reasoning is None else str(reasoning),
        risk_level=coerce_enum(decoded.get("risk_level"), RiskLevel, RiskLevel.MEDIUM),
        timeframe=coerce_enum(decoded.get("timeframe"), PredictionTimeframe, PredictionTimeframe.SHORT_TERM),
    )


def fallback_verdict(reasoning: str, reason: str) -> ModelVerdict:
    return ModelVerdict(reasoning=reasoning, parsed=False, fallback_reason=reason)


def coerce_enum(value: Any, enum_type: type[E], default: E) -> E:
    """Map ``value`` onto ``enum_type`` case-insensitively, ``default`` when unknown."""

    if not isinstance(value, str):
        return default
    key = value.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return enum_type(key)
    except ValueError:
        return default


def coerce_confidence(value: Any) -> float:
    """
    Normalize a confidence value to ``[0, 1]``.

    Numbers and numeric strings are accepted; ``"85%"`` and ``85`` both read as
    0.85. Anything unusable yields the default.
    """

    if isinstance(value, bool):
        return DEFAULT_CONFIDENCE

    percent = False
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("%"):
            percent = True
            raw = raw[:-1].strip()
        try:
            number = float(raw)
        except (ValueError, OverflowError):
            return DEFAULT_CONFIDENCE
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf if value > 0 else -math.inf
    else:
        return DEFAULT_CONFIDENCE

    if math.isnan(number):
        return DEFAULT_CONFIDENCE
    if percent or 1.0 < number <= 100.0:
        number /= 100.0
    return min(max(number, 0.0), 1.0)
