"""
Centralized configuration with environment variable overrides.

All scheduling constants (slot step, fallback durations, the roster
outage policy) are configurable here. Nothing is hardcoded in the
roster or slot logic.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv

from chairtime.logging_context import QueryIdFilter
from chairtime.utils import parse_time_of_day

load_dotenv()

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


class RosterFetchErrorPolicy(str, Enum):
    """What to do when the roster source cannot be reached."""

    ASSUME_OPEN = "assume_open"
    ASSUME_CLOSED = "assume_closed"
    PROPAGATE_UNKNOWN = "propagate_unknown"


class SlotDisplayFormat(str, Enum):
    """How slot start times are rendered for callers."""

    H24 = "24h"
    H12 = "12h"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_choice(env_var: str, default: str, enum_cls: type[Enum]) -> Enum:
    """Parse an enum member from an env var, listing the allowed values on error."""
    raw = os.getenv(env_var, default).strip().lower()
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(
            f"Invalid value for {env_var}: {raw!r} (expected one of: {allowed})"
        ) from None


@dataclass(frozen=True)
class ShopConfig:
    """Shop-level display settings."""

    name: str = os.getenv("SHOP_NAME", "Gold Standard Barbers")


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and roster resolution settings."""

    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "30")
    default_service_minutes: int = _safe_int("DEFAULT_SERVICE_MINUTES", "30")
    default_booking_minutes: int = _safe_int("DEFAULT_BOOKING_MINUTES", "60")
    on_roster_fetch_error: RosterFetchErrorPolicy = _safe_choice(
        "ON_ROSTER_FETCH_ERROR", "propagate_unknown", RosterFetchErrorPolicy
    )
    fallback_day_start: str = os.getenv("FALLBACK_DAY_START", "09:00")
    fallback_day_end: str = os.getenv("FALLBACK_DAY_END", "18:00")
    horizon_days: int = _safe_int("BOOKING_HORIZON_DAYS", "14")
    slot_display_format: SlotDisplayFormat = _safe_choice(
        "SLOT_DISPLAY_FORMAT", "24h", SlotDisplayFormat
    )


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    shop: ShopConfig = field(default_factory=ShopConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    scheduling = config.scheduling
    step = scheduling.slot_step_minutes
    if step < 1 or MINUTES_PER_DAY % step != 0:
        raise ValueError(
            f"SLOT_STEP_MINUTES must be a positive divisor of {MINUTES_PER_DAY}, got {step}"
        )
    if scheduling.default_service_minutes < 1:
        raise ValueError(
            "DEFAULT_SERVICE_MINUTES must be >= 1, "
            f"got {scheduling.default_service_minutes}"
        )
    if scheduling.default_booking_minutes < 1:
        raise ValueError(
            "DEFAULT_BOOKING_MINUTES must be >= 1, "
            f"got {scheduling.default_booking_minutes}"
        )
    if scheduling.horizon_days < 1:
        raise ValueError(
            f"BOOKING_HORIZON_DAYS must be >= 1, got {scheduling.horizon_days}"
        )

    bounds = []
    for env_var, value in [
        ("FALLBACK_DAY_START", scheduling.fallback_day_start),
        ("FALLBACK_DAY_END", scheduling.fallback_day_end),
    ]:
        try:
            bounds.append(parse_time_of_day(value))
        except ValueError:
            raise ValueError(f"Invalid time for {env_var}: {value!r}") from None
    if bounds[0] >= bounds[1]:
        raise ValueError(
            "FALLBACK_DAY_START must be before FALLBACK_DAY_END, "
            f"got {scheduling.fallback_day_start}-{scheduling.fallback_day_end}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    # Filter on the handler so records from every logger carry query_id
    handler = logging.StreamHandler()
    handler.addFilter(QueryIdFilter())
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s %(query_id)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )
    logger.info("Configuration loaded for '%s'", config.shop.name)
    return config


# Singleton instance
settings = load_config()
