"""Booking footprint and slot query data models."""

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chairtime.utils import END_OF_DAY, parse_time_of_day


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


class BookedInterval(BaseModel):
    """Time footprint of an existing booking."""

    model_config = ConfigDict(frozen=True)

    barber_id: str = Field(min_length=1)
    date: datetime.date
    start_time: int = Field(ge=0, lt=END_OF_DAY)
    duration_minutes: Optional[int] = None
    status: BookingStatus = BookingStatus.CONFIRMED

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_time_of_day(value)
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        # Stored rows use "Confirmed" / "Pending"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def is_active(self) -> bool:
        """Only pending and confirmed bookings occupy the chair."""
        return self.status in ACTIVE_STATUSES

    def span(self, default_minutes: int) -> tuple[int, int]:
        """Half-open ``(start, end)`` minutes, using the default for missing durations."""
        duration = self.duration_minutes
        if not duration or duration <= 0:
            duration = default_minutes
        return self.start_time, self.start_time + duration


class SlotQuery(BaseModel):
    """Input to slot generation: who, when, and which services."""

    model_config = ConfigDict(frozen=True)

    barber_id: str = Field(min_length=1)
    date: datetime.date
    service_ids: tuple[str, ...] = ()

    @field_validator("service_ids", mode="before")
    @classmethod
    def _dedupe(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            cleaned = [str(v).strip() for v in value if str(v).strip()]
            return tuple(dict.fromkeys(cleaned))
        return value

    def without_services(self) -> "SlotQuery":
        """Same barber and date, default duration."""
        return self.model_copy(update={"service_ids": ()})
