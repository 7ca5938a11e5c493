"""
Runtime Configuration Module

Provides configuration loading and management for the distributor tooling.
"""

from .runtime import (
    IDENTIFIER_KINDS,
    GeneratorConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "IDENTIFIER_KINDS",
    "GeneratorConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
