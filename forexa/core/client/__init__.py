"""forexa客户端模块"""

from forexa.core.client.client import ForexaClient

__all__ = ["ForexaClient"]
