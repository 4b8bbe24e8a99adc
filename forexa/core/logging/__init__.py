"""Logging utilities for monitoring and debugging."""

from forexa.core.logging.config import LogConfig
from forexa.core.logging.logger import (
    StructuredLogger,
    bind,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
    mask_secrets,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "bind",
    "current_trace_id",
    "get_logger",
    "configure_logging",
    "log_context",
    "logger",
    "mask_secrets",
]
