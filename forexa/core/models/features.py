"""Normalized feature schema consumed by the prediction prompt."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class FeatureMetadata(BaseModel):
    """特征元数据."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    timestamp: datetime
    contributing_sources: list[str] = Field(default_factory=list)
    data_source: str = ""

    @field_serializer("timestamp", when_used="json")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to isoformat string."""
        return value.isoformat()


class FeatureSet(BaseModel):
    """Stable-shape features; every sub-field may be empty but is never missing."""

    model_config = ConfigDict(frozen=True)

    price: dict[str, Any] = Field(default_factory=dict)
    technical: dict[str, Any] = Field(default_factory=dict)
    aggregate: dict[str, Any] = Field(default_factory=dict)
    snapshot: dict[str, Any] = Field(default_factory=dict)
    news: list[dict[str, Any]] = Field(default_factory=list)
    metadata: FeatureMetadata

    @property
    def is_empty(self) -> bool:
        return not (self.price or self.technical or self.aggregate or self.snapshot or self.news)
