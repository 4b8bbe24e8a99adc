"""
健康检查路由
"""

from fastapi import APIRouter, Request

from forexa import __version__
from forexa.web.models import APIResponse
from forexa.web.utils import get_request_id

router = APIRouter()


@router.get("/", response_model=APIResponse)
async def health_check(request: Request) -> APIResponse:
    """基础健康检查"""
    return APIResponse(
        success=True,
        data={"status": "ok", "version": __version__},
        message="Welcome to Forexa API!",
        request_id=get_request_id(request),
    )
