"""配置管理模块 - 处理forexa客户端的配置"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from forexa.core.exceptions import ConfigurationError
from forexa.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ProviderConfig:
    """数据提供商配置"""

    timeout: float = 10.0
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    polygon_base_url: str = "https://api.polygon.io"
    intraday_interval: str = "5min"
    technical_indicator: str = "RSI"
    news_ticker: str = "C:FOREX"
    news_limit: int = 10


@dataclass
class ModelConfig:
    """生成模型配置"""

    model_id: str = "gemini-2.0-flash-exp"
    timeout: float = 60.0
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    temperature: float = 0.7
    max_output_tokens: int = 2048


@dataclass
class CredentialsConfig:
    """API credentials. Values never appear in ``repr``."""

    alpha_vantage_key: str = field(default="", repr=False)
    polygon_key: str = field(default="", repr=False)
    google_api_key: str = field(default="", repr=False)


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class WebConfig:
    """Web 服务配置"""

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origin: str = "http://localhost:3000"
    batch_concurrency: int | None = None


@dataclass
class ForexaConfig:
    """forexa主配置"""

    providers: ProviderConfig = field(default_factory=ProviderConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    web: WebConfig = field(default_factory=WebConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ForexaConfig":
        """从字典创建配置"""
        return cls(
            providers=ProviderConfig(**_known(ProviderConfig, config_dict.get("providers", {}))),
            model=ModelConfig(**_known(ModelConfig, config_dict.get("model", {}))),
            credentials=CredentialsConfig(**_known(CredentialsConfig, config_dict.get("credentials", {}))),
            logging=LoggingConfig(**_known(LoggingConfig, config_dict.get("logging", {}))),
            web=WebConfig(**_known(WebConfig, config_dict.get("web", {}))),
        )

    def to_dict(self, *, include_credentials: bool = False) -> dict[str, Any]:
        """转换为字典"""
        result = {
            "providers": asdict(self.providers),
            "model": asdict(self.model),
            "logging": asdict(self.logging),
            "web": asdict(self.web),
        }
        if include_credentials:
            result["credentials"] = asdict(self.credentials)
        return result


def _known(section: type, values: Any) -> dict[str, Any]:
    if not isinstance(values, dict):
        logger.warning(f"Ignoring {section.__name__} section: expected a table, got {type(values).__name__}")
        return {}
    names = {item.name for item in fields(section)}
    unknown = set(values) - names
    if unknown:
        logger.warning(f"Ignoring unknown {section.__name__} keys: {sorted(unknown)}")
    return {key: value for key, value in values.items() if key in names}


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否应用环境变量覆盖
        """
        self.config_path = config_path or Path(os.getenv("FOREXA_CONFIG", Path.home() / ".forexa" / "config.toml"))
        self.config = self._load_config()
        if use_env:
            env_config = load_config_from_env()
            if env_config:
                self.update_config(**env_config)

    def _load_config(self) -> ForexaConfig:
        """加载配置"""
        if not self.config_path.exists():
            return ForexaConfig()

        try:
            with open(self.config_path, "rb") as f:
                config_dict = tomllib.load(f)
            return ForexaConfig.from_dict(config_dict)
        except (OSError, tomllib.TOMLDecodeError, TypeError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return ForexaConfig()

    def get_config(self) -> ForexaConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置"""
        config_dict = self.config.to_dict(include_credentials=True)

        def deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
            for k, v in u.items():
                if isinstance(v, dict):
                    d[k] = deep_update(d.get(k, {}), v)
                else:
                    d[k] = v
            return d

        deep_update(config_dict, updates)
        self.config = ForexaConfig.from_dict(config_dict)


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    credentials: dict[str, Any] = {}
    for env_name, key in (
        ("ALPHA_VANTAGE_API_KEY", "alpha_vantage_key"),
        ("POLYGON_API_KEY", "polygon_key"),
        ("GOOGLE_API_KEY", "google_api_key"),
    ):
        value = os.getenv(env_name)
        if value:
            credentials[key] = value
    if credentials:
        config["credentials"] = credentials

    provider_config: dict[str, Any] = {}
    provider_timeout = os.getenv("FOREXA_PROVIDER_TIMEOUT")
    if provider_timeout is not None:
        provider_config["timeout"] = _env_number("FOREXA_PROVIDER_TIMEOUT", provider_timeout, float)
    if provider_config:
        config["providers"] = provider_config

    model_config: dict[str, Any] = {}
    ai_timeout = os.getenv("FOREXA_AI_TIMEOUT")
    if ai_timeout is not None:
        model_config["timeout"] = _env_number("FOREXA_AI_TIMEOUT", ai_timeout, float)
    model_id = os.getenv("FOREXA_MODEL_ID")
    if model_id:
        model_config["model_id"] = model_id
    if model_config:
        config["model"] = model_config

    logging_config: dict[str, Any] = {}
    logging_level = os.getenv("FOREXA_LOGGING_LEVEL")
    if logging_level is not None:
        logging_config["level"] = logging_level
    if os.getenv("FOREXA_LOG_FILE"):
        logging_config["file"] = os.getenv("FOREXA_LOG_FILE")
    if logging_config:
        config["logging"] = logging_config

    web_config: dict[str, Any] = {}
    if os.getenv("FOREXA_HOST"):
        web_config["host"] = os.getenv("FOREXA_HOST")
    port_name = "FOREXA_PORT" if os.getenv("FOREXA_PORT") else "PORT"
    port = os.getenv(port_name)
    if port is not None:
        web_config["port"] = _env_number(port_name, port, int)
    if os.getenv("FOREXA_CORS_ORIGIN"):
        web_config["cors_origin"] = os.getenv("FOREXA_CORS_ORIGIN")
    if web_config:
        config["web"] = web_config

    return config


def _env_number(name: str, raw: str, cast: type[int] | type[float]) -> Any:
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"Environment variable {name} must be a number, got {raw!r}", name) from e
