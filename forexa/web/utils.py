"""Web相关的工具函数"""

from fastapi import Request

from forexa.core.client import ForexaClient


def get_request_id(request: Request) -> str | None:
    """返回当前请求ID（中间件生成或来自 X-Request-ID 请求头）"""
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def get_client(request: Request) -> ForexaClient:
    """从应用状态获取 ForexaClient"""
    return request.app.state.forexa_client
