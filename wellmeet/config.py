"""
Centralized configuration with environment variable overrides.

Dialog pacing, API endpoints, and booking presentation settings are
configurable here. Nothing is hardcoded in dialog or booking logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DIALOG_MODES = ("fixed", "free_text")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class DialogConfig:
    """Recommendation dialog behaviour."""

    mode: str = os.getenv("DIALOG_MODE", "fixed")
    thinking_delay_sec: float = _safe_float("DIALOG_THINKING_DELAY", "1.5")


@dataclass(frozen=True)
class ApiConfig:
    """Consumed REST service settings."""

    base_url: str = os.getenv("WELLMEET_API_URL", "http://localhost:8080/api")
    member_id: str = os.getenv("WELLMEET_MEMBER_ID", "1")
    timeout_sec: float = _safe_float("API_TIMEOUT", "10.0")


@dataclass(frozen=True)
class BookingConfig:
    """Reservation form presentation settings."""

    quick_date_count: int = _safe_int("QUICK_DATE_COUNT", "3")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    dialog: DialogConfig = field(default_factory=DialogConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "WellMeet")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.dialog.mode not in DIALOG_MODES:
        raise ValueError(
            f"DIALOG_MODE must be one of {DIALOG_MODES}, got {config.dialog.mode!r}"
        )
    if config.dialog.thinking_delay_sec < 0:
        raise ValueError(
            f"DIALOG_THINKING_DELAY must be >= 0, got {config.dialog.thinking_delay_sec}"
        )
    if not config.api.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"WELLMEET_API_URL must be an http(s) URL, got {config.api.base_url!r}"
        )
    if config.api.timeout_sec <= 0:
        raise ValueError(
            f"API_TIMEOUT must be > 0, got {config.api.timeout_sec}"
        )
    if not 1 <= config.booking.quick_date_count <= 3:
        raise ValueError(
            f"QUICK_DATE_COUNT must be between 1 and 3, got {config.booking.quick_date_count}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
