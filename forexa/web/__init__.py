"""
Web API 模块 - FastAPI 网络服务实现
"""

from forexa.web.app import create_app
from forexa.web.models import APIResponse, BatchPredictionRequest, ErrorResponse

__all__ = ["create_app", "APIResponse", "BatchPredictionRequest", "ErrorResponse"]
