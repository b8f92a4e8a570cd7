"""Configuration module."""

from entityhub.config.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)
from entityhub.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_run_context",
    "clear_run_context",
]
