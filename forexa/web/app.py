"""
FastAPI 应用工厂和配置
"""

import time
import uuid
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from forexa import __version__
from forexa.core.client import ForexaClient
from forexa.core.config import ConfigManager, ForexaConfig
from forexa.core.exceptions import DataValidationError, ForexaError
from forexa.core.logging import get_logger, log_context
from forexa.web.models import ErrorResponse
from forexa.web.routes import ai_router, health_router, market_router, metrics_router
from forexa.web.utils import get_request_id

logger = get_logger(__name__)

ClientFactory = Callable[[ForexaConfig], Any]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理"""
    client = app.state.client_factory(app.state.config)
    app.state.forexa_client = client
    logger.info("forexa web service started")
    try:
        yield
    finally:
        await client.aclose()
        logger.info("forexa web service stopped")


def create_app(client_factory: ClientFactory | None = None, config: ForexaConfig | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        client_factory: 根据配置构建客户端的工厂，默认为 ForexaClient
        config: 应用配置，默认从配置文件和环境变量加载
    """
    config = config or ConfigManager().get_config()
    app = FastAPI(
        title="forexa - 外汇行情聚合与AI交易预测",
        description="聚合 Alpha Vantage 与 Polygon.io 行情数据，并通过 Gemini 生成交易预测",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.client_factory = client_factory or ForexaClient

    _setup_middleware(app, config)
    _setup_routes(app)
    _setup_exception_handlers(app)

    return app


def _setup_middleware(app: FastAPI, config: ForexaConfig) -> None:
    """配置中间件"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.web.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable) -> Any:
        """为每个请求绑定追踪ID"""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()
        with log_context(trace_id=request_id, path=request.url.path):
            response = await call_next(request)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {time.perf_counter() - start:.3f}s"
            )
        response.headers["X-Request-ID"] = request_id
        return response


def _setup_routes(app: FastAPI) -> None:
    """注册路由"""
    app.include_router(health_router, tags=["health"])
    app.include_router(market_router, tags=["market"])
    app.include_router(ai_router, prefix="/ai", tags=["ai"])
    app.include_router(metrics_router)


def _error_response(request: Request, status_code: int, **content: Any) -> JSONResponse:
    body = ErrorResponse(request_id=get_request_id(request), **content)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _setup_exception_handlers(app: FastAPI) -> None:
    """配置异常处理器"""

    @app.exception_handler(DataValidationError)
    async def validation_exception_handler(request: Request, exc: DataValidationError) -> JSONResponse:
        """无效的调用参数"""
        return _error_response(request, 400, **exc.to_payload())

    @app.exception_handler(ForexaError)
    async def forexa_exception_handler(request: Request, exc: ForexaError) -> JSONResponse:
        """处理 forexa 自定义异常（数据源、聚合与模型失败）"""
        logger.bind(error_code=exc.error_code.value).error(f"{request.url.path} failed: {exc.message}")
        return _error_response(request, 500, **exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """请求体格式错误"""
        return _error_response(
            request,
            400,
            error="RequestValidationError",
            error_code="VALIDATION_ERROR",
            message="Invalid request payload",
            details={"errors": jsonable_errors(exc)},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """处理 HTTP 异常"""
        return _error_response(
            request,
            exc.status_code,
            error="HTTPException",
            message=str(exc.detail),
            details={"status_code": exc.status_code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """处理未捕获的异常"""
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error_response(
            request,
            500,
            error="InternalServerError",
            message="Internal server error",
            details={"type": type(exc).__name__},
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in exc.errors()]
