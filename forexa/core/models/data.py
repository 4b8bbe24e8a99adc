"""Raw provider payloads and the composite result of a fan-out fetch."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .market import FeedSlot


class RawProviderResult(BaseModel):
    """Untyped provider payload tagged with its source and call time."""

    model_config = ConfigDict(frozen=True)

    provider: str
    operation: str
    payload: Any = None
    fetched_at: datetime


class CompositeMarketData(BaseModel):
    """Successful provider results for one symbol at one point in time.

    Failed calls are omitted from ``results`` rather than null-filled, and
    ``contributing_sources`` only names providers with at least one result.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    timestamp: datetime
    results: dict[FeedSlot, RawProviderResult] = Field(default_factory=dict)
    contributing_sources: list[str] = Field(default_factory=list)

    def payload(self, slot: FeedSlot) -> Any:
        """Return the raw payload stored for ``slot`` or ``None``."""

        result = self.results.get(slot)
        return result.payload if result is not None else None
