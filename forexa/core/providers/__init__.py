"""Market-data provider clients."""

from forexa.core.providers.alpha_vantage import AlphaVantageClient
from forexa.core.providers.base import ProviderClient
from forexa.core.providers.polygon import PolygonClient

__all__ = ["ProviderClient", "AlphaVantageClient", "PolygonClient"]
