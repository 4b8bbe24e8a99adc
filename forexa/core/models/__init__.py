"""Core data models for forexa."""

from .data import CompositeMarketData, RawProviderResult
from .features import FeatureMetadata, FeatureSet
from .market import FeedSlot, PredictionTimeframe, ProviderName, RiskLevel, TradeAction
from .prediction import ErrorInfo, ModelVerdict, Prediction, PredictionOutcome
from .symbols import CurrencyPair, normalize_currency, normalize_symbol

__all__ = [
    "CompositeMarketData",
    "RawProviderResult",
    "FeatureMetadata",
    "FeatureSet",
    "FeedSlot",
    "PredictionTimeframe",
    "ProviderName",
    "RiskLevel",
    "TradeAction",
    "ErrorInfo",
    "ModelVerdict",
    "Prediction",
    "PredictionOutcome",
    "CurrencyPair",
    "normalize_currency",
    "normalize_symbol",
]
