"""Analysis prompt construction."""

from __future__ import annotations

import json
from typing import Any

from forexa.core.models import FeatureSet

ANSWER_TEMPLATE = """{
  "prediction": "BUY|SELL|HOLD",
  "confidence": 0.85,
  "reasoning": "Detailed explanation of your analysis",
  "risk_level": "LOW|MEDIUM|HIGH",
  "timeframe": "SHORT_TERM|MEDIUM_TERM|LONG_TERM"
}"""

CHECKLIST = (
    "Technical analysis patterns",
    "Market sentiment",
    "Risk factors",
    "Economic indicators",
    "Historical patterns",
)


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


def build_analysis_prompt(features: FeatureSet) -> str:
    """Render the analysis prompt for ``features``. Same input, same text."""

    metadata = features.metadata
    checklist = "\n".join(f"{index}. {item}" for index, item in enumerate(CHECKLIST, start=1))
    return (
        "You are an expert forex trading analyst. Analyze the following market data "
        "and provide a trading prediction.\n"
        "\n"
        "Market Data:\n"
        f"- Symbol: {metadata.symbol}\n"
        f"- Timestamp: {metadata.timestamp.isoformat()}\n"
        f"- Price Data: {_to_json(features.price)}\n"
        f"- Technical Indicators: {_to_json(features.technical)}\n"
        "\n"
        "Please provide your analysis in the following JSON format:\n"
        f"{ANSWER_TEMPLATE}\n"
        "\n"
        "Consider:\n"
        f"{checklist}\n"
        "\n"
        "Be concise but thorough in your reasoning.\n"
    )
