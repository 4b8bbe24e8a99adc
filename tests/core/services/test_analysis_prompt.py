"""Tests for analysis prompt construction."""

import json
from datetime import datetime, timezone

from forexa.core.models import FeatureMetadata, FeatureSet
from forexa.core.services.prompts import ANSWER_TEMPLATE, CHECKLIST, build_analysis_prompt

NOW = datetime(2024, 1, 2, 12, 30, tzinfo=timezone.utc)


def _features(**overrides) -> FeatureSet:
    values = {
        "price": {"1. open": "1.0940", "4. close": "1.0950"},
        "technical": {"2024-01-02": {"RSI": "55.1"}},
        "metadata": FeatureMetadata(symbol="EUR/USD", timestamp=NOW, contributing_sources=["Alpha Vantage"]),
    }
    values.update(overrides)
    return FeatureSet(**values)


def test_prompt_embeds_symbol_timestamp_and_data():
    features = _features()

    prompt = build_analysis_prompt(features)

    assert "- Symbol: EUR/USD" in prompt
    assert "- Timestamp: 2024-01-02T12:30:00+00:00" in prompt
    assert json.dumps(features.price, indent=2) in prompt
    assert json.dumps(features.technical, indent=2) in prompt


def test_prompt_contains_answer_template_and_checklist():
    prompt = build_analysis_prompt(_features())

    assert ANSWER_TEMPLATE in prompt
    assert '"prediction": "BUY|SELL|HOLD"' in prompt
    for index, item in enumerate(CHECKLIST, start=1):
        assert f"{index}. {item}" in prompt
    assert "5. Historical patterns" in prompt


def test_prompt_is_deterministic():
    assert build_analysis_prompt(_features()) == build_analysis_prompt(_features())


def test_empty_features_render_as_empty_objects():
    prompt = build_analysis_prompt(_features(price={}, technical={}))

    assert "- Price Data: {}" in prompt
    assert "- Technical Indicators: {}" in prompt
