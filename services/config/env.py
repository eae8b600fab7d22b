from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ServiceConfig:
    host: str = "0.0.0.0"
    port: int = 38104
    api_key: Optional[str] = None
    max_rules: int = 1000  # <= 0 disables the limit
    include_report: bool = True


def get_service_config() -> ServiceConfig:
    return ServiceConfig(
        host=os.getenv("MAPPING_HOST", "0.0.0.0"),
        port=_env_int("MAPPING_PORT", 38104),
        api_key=os.getenv("API_KEY") or None,
        max_rules=_env_int("MAPPING_MAX_RULES", 1000),
        include_report=_env_bool("MAPPING_INCLUDE_REPORT", True),
    )


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_file: Optional[str] = None


def get_logging_config() -> LoggingConfig:
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
    )
