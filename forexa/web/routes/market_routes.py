"""
市场数据 API 路由
提供综合行情、汇率、涨跌榜、技术指标和市场状态接口
"""

from fastapi import APIRouter, Query, Request

from forexa.web.models import APIResponse
from forexa.web.utils import get_client, get_request_id

router = APIRouter()


@router.get("/market-data/{symbol:path}", response_model=APIResponse)
async def get_market_data(request: Request, symbol: str) -> APIResponse:
    """
    获取货币对的综合行情数据

    - **symbol**: 货币对，如 EUR/USD、EURUSD、C:EURUSD
    """
    composite = await get_client(request).get_comprehensive_market_data(symbol)
    return APIResponse(
        success=True,
        data=composite.model_dump(mode="json"),
        message=f"Aggregated {len(composite.results)} feeds for {composite.symbol}",
        request_id=get_request_id(request),
    )


@router.get("/forex-rate/{from_currency}/{to_currency}", response_model=APIResponse)
async def get_forex_rate(request: Request, from_currency: str, to_currency: str) -> APIResponse:
    """获取实时汇率换算"""
    rate = await get_client(request).get_forex_rate(from_currency, to_currency)
    return APIResponse(success=True, data=rate, request_id=get_request_id(request))


@router.get("/market-movers", response_model=APIResponse)
async def get_market_movers(
    request: Request,
    direction: str = Query("gainers", description="涨跌方向 (gainers, losers)"),
) -> APIResponse:
    """获取外汇涨跌榜"""
    movers = await get_client(request).get_market_gainers_losers(direction)
    return APIResponse(success=True, data=movers, request_id=get_request_id(request))


@router.get("/technical-indicators/{currency_pair}/{indicator}", response_model=APIResponse)
async def get_technical_indicators(request: Request, currency_pair: str, indicator: str) -> APIResponse:
    """
    获取 Polygon.io 技术指标

    - **currency_pair**: 货币对，如 EURUSD 或 EUR-USD
    - **indicator**: 指标名称，如 SMA、EMA、RSI、MACD
    """
    indicators = await get_client(request).get_polygon_technical_indicators(currency_pair, indicator)
    return APIResponse(success=True, data=indicators, request_id=get_request_id(request))


@router.get("/market-status", response_model=APIResponse)
async def get_market_status(request: Request) -> APIResponse:
    """获取当前市场开闭市状态"""
    status = await get_client(request).get_market_status()
    return APIResponse(success=True, data=status, request_id=get_request_id(request))
