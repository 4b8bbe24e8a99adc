"""
AI 预测 API 路由
"""

from fastapi import APIRouter, Request

from forexa.web.models import APIResponse, BatchPredictionRequest
from forexa.web.utils import get_client, get_request_id

router = APIRouter()


@router.post("/predict/batch", response_model=APIResponse)
async def predict_batch(request_data: BatchPredictionRequest, request: Request) -> APIResponse:
    """
    批量生成预测

    每个货币对独立处理，单个失败只影响对应的结果项；``fail_fast`` 为真时任一失败即返回错误。
    """
    outcomes = await get_client(request).generate_batch_predictions(
        request_data.symbols, fail_fast=request_data.fail_fast
    )
    failed = sum(1 for outcome in outcomes if not outcome.ok)
    return APIResponse(
        success=True,
        data=[outcome.model_dump(mode="json") for outcome in outcomes],
        message=f"{len(outcomes) - failed} of {len(outcomes)} predictions generated",
        request_id=get_request_id(request),
    )


@router.get("/predict/{symbol:path}", response_model=APIResponse)
async def predict(request: Request, symbol: str) -> APIResponse:
    """生成单个货币对的交易预测"""
    prediction = await get_client(request).generate_prediction(symbol)
    return APIResponse(
        success=True,
        data=prediction.model_dump(mode="json"),
        request_id=get_request_id(request),
    )
