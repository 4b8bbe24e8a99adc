"""Market-related enums and types."""

from enum import Enum


class ProviderName(str, Enum):
    """数据提供商名称枚举."""

    ALPHA_VANTAGE = "Alpha Vantage"
    POLYGON = "Polygon.io"


class FeedSlot(str, Enum):
    """Constituent calls of a comprehensive market-data fetch."""

    INTRADAY = "intraday"
    TECHNICAL = "technical"
    AGGREGATES = "aggregates"
    SNAPSHOT = "snapshot"
    NEWS = "news"


class TradeAction(str, Enum):
    """交易建议枚举."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class RiskLevel(str, Enum):
    """风险等级枚举."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class PredictionTimeframe(str, Enum):
    """预测时间范围枚举."""

    SHORT_TERM = "SHORT_TERM"
    MEDIUM_TERM = "MEDIUM_TERM"
    LONG_TERM = "LONG_TERM"
