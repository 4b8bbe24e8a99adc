"""
Web API 路由模块
"""

from forexa.web.metrics import router as metrics_router
from forexa.web.routes.ai_routes import router as ai_router
from forexa.web.routes.health_routes import router as health_router
from forexa.web.routes.market_routes import router as market_router

__all__ = ["ai_router", "health_router", "market_router", "metrics_router"]
