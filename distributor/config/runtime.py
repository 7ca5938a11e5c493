"""
Runtime Configuration

Central configuration for artifact generation and the command-line tool.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


IDENTIFIER_KINDS = ("address", "string")


@dataclass
class GeneratorConfig:
    """Configuration for building distribution artifacts."""
    identifier_kind: str = "address"
    hash_keys: bool = False
    json_indent: int = 2

    def __post_init__(self):
        if self.identifier_kind not in IDENTIFIER_KINDS:
            raise ValueError(
                f"identifier_kind must be one of {IDENTIFIER_KINDS}, "
                f"got {self.identifier_kind!r}"
            )


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the distributor tooling.

    Can be loaded from:
    - Environment variables (DISTRIBUTOR_*, .env honoured)
    - YAML file
    - Programmatic construction
    """
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - DISTRIBUTOR_IDENTIFIER_KIND: "address" or "string"
        - DISTRIBUTOR_HASH_KEYS: Hash raw string keys before building (true/false)
        - DISTRIBUTOR_JSON_INDENT: Indent of written artifacts
        - DISTRIBUTOR_LOG_LEVEL: Log level name
        - DISTRIBUTOR_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("DISTRIBUTOR_IDENTIFIER_KIND"):
            overrides.setdefault("generator", {})["identifier_kind"] = (
                os.getenv("DISTRIBUTOR_IDENTIFIER_KIND", "address").lower()
            )
        if os.getenv("DISTRIBUTOR_HASH_KEYS"):
            overrides.setdefault("generator", {})["hash_keys"] = _env_flag(
                os.getenv("DISTRIBUTOR_HASH_KEYS", "false")
            )
        if os.getenv("DISTRIBUTOR_JSON_INDENT"):
            overrides.setdefault("generator", {})["json_indent"] = int(
                os.getenv("DISTRIBUTOR_JSON_INDENT", "2")
            )

        if os.getenv("DISTRIBUTOR_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = (
                os.getenv("DISTRIBUTOR_LOG_LEVEL", "INFO").upper()
            )
        if os.getenv("DISTRIBUTOR_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("DISTRIBUTOR_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        generator_data = data.get("generator", {})
        logging_data = data.get("logging", {})

        generator = GeneratorConfig(**generator_data) if generator_data else GeneratorConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            generator=generator,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for key, value in overrides.get("generator", {}).items():
            setattr(new_config.generator, key, value)
        new_config.generator.__post_init__()

        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "generator": {
                "identifier_kind": self.generator.identifier_kind,
                "hash_keys": self.generator.hash_keys,
                "json_indent": self.generator.json_indent,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
