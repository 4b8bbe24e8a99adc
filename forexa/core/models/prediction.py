"""Prediction models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .features import FeatureSet
from .market import PredictionTimeframe, RiskLevel, TradeAction


class ModelVerdict(BaseModel):
    """Fields recovered from a model reply, or the safe default when unparseable."""

    model_config = ConfigDict(frozen=True)

    action: TradeAction = TradeAction.HOLD
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    reasoning: str = ""
    risk_level: RiskLevel = RiskLevel.MEDIUM
    timeframe: PredictionTimeframe = PredictionTimeframe.SHORT_TERM
    parsed: bool = True
    fallback_reason: str | None = None


class Prediction(BaseModel):
    """单次预测结果."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    symbol: str
    action: TradeAction
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
    risk_level: RiskLevel
    timeframe: PredictionTimeframe
    model_id: str
    generated_at: datetime
    source_features: FeatureSet

    @field_serializer("generated_at", when_used="json")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to isoformat string."""
        return value.isoformat()


class ErrorInfo(BaseModel):
    """Serializable description of a failed batch slot."""

    model_config = ConfigDict(frozen=True)

    error: str
    error_code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class PredictionOutcome(BaseModel):
    """One slot of a batch run: either a prediction or an error."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    prediction: Prediction | None = None
    error: ErrorInfo | None = None

    @property
    def ok(self) -> bool:
        return self.prediction is not None
