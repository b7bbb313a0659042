"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from JSON files
- Provides typed access to dispatcher, logging and telemetry settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)

ERROR_POLICIES = ("propagate", "log")


@dataclass(frozen=True)
class DispatchConfig:
    """Listener failure handling during dispatch."""
    error_policy: str = "propagate"

    def __post_init__(self) -> None:
        if self.error_policy not in ERROR_POLICIES:
            raise ValueError(
                f"error_policy must be one of {ERROR_POLICIES}, got {self.error_policy!r}"
            )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging output configuration."""
    level: str = "WARNING"
    json_format: bool = False


@dataclass(frozen=True)
class TelemetryConfig:
    """OpenTelemetry configuration."""
    endpoint: str = ""
    service_name: str = "eventdispatch"
    insecure: bool = False
    buffer_size: int = 1000


@dataclass(frozen=True)
class EventDispatchConfig:
    """Root configuration for eventdispatch."""
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


def _env_override(data: dict, prefix: str = "EVENTDISPATCH") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern EVENTDISPATCH_SECTION_KEY.
    For example: EVENTDISPATCH_DISPATCH_ERROR_POLICY=log
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        parts = key[len(prefix) + 1:].lower().split("_", 1)
        if len(parts) == 2:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a JSON object", path)
        return {}
    return data


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    # Convert string numbers to int/bool
    for f in dataclasses.fields(cls):
        if f.name in filtered and isinstance(filtered[f.name], str):
            if f.type == "int":
                filtered[f.name] = int(filtered[f.name])
            elif f.type == "bool":
                filtered[f.name] = filtered[f.name].lower() in ("true", "1", "yes")

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "EVENTDISPATCH",
) -> EventDispatchConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (EVENTDISPATCH_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to eventdispatch.json in CWD.
        env_prefix: Environment variable prefix. Defaults to EVENTDISPATCH.
    """
    config_path = Path(path) if path else Path("eventdispatch.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return EventDispatchConfig(
        dispatch=_build_sub_config(DispatchConfig, data.get("dispatch", {})),
        logging=_build_sub_config(LoggingConfig, data.get("logging", {})),
        telemetry=_build_sub_config(TelemetryConfig, data.get("telemetry", {})),
    )
