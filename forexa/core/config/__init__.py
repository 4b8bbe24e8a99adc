"""Configuration management module."""

from forexa.core.config.settings import (
    ConfigManager,
    CredentialsConfig,
    ForexaConfig,
    LoggingConfig,
    ModelConfig,
    ProviderConfig,
    WebConfig,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "ForexaConfig",
    "load_config_from_env",
    "ProviderConfig",
    "ModelConfig",
    "CredentialsConfig",
    "LoggingConfig",
    "WebConfig",
]
