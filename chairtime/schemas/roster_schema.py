"""Roster and work-shift data models.

Shift times are held as minutes since local midnight. Anything that
cannot be read as a time of day is stored as ``None`` so the shift is
simply unusable rather than an error.
"""

import datetime
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from chairtime.utils import END_OF_DAY, parse_date, parse_time_of_day

logger = logging.getLogger(__name__)

ROSTER_DAYS = 7


class WorkingWindow(BaseModel):
    """Start-end range a barber works on one date."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, le=END_OF_DAY)
    end: int = Field(ge=0, le=END_OF_DAY)
    assumed: bool = False

    @model_validator(mode="after")
    def _check_order(self) -> "WorkingWindow":
        if self.start >= self.end:
            raise ValueError(f"Window start {self.start} must be before end {self.end}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


class WorkShift(BaseModel):
    """One barber's scheduled interval (or day off) on one date."""

    model_config = ConfigDict(frozen=True)

    barber_id: str = Field(min_length=1)
    date: datetime.date
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    is_off: bool = False

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value if 0 <= value <= END_OF_DAY else None
        if isinstance(value, str):
            try:
                return parse_time_of_day(value)
            except ValueError:
                logger.debug("Unreadable shift time %r treated as missing", value)
                return None
        return None

    @property
    def is_usable(self) -> bool:
        """True when the shift yields a working window."""
        return (
            not self.is_off
            and self.start_time is not None
            and self.end_time is not None
            and self.start_time < self.end_time
        )

    def working_window(self) -> Optional[WorkingWindow]:
        if not self.is_usable:
            return None
        return WorkingWindow(start=self.start_time, end=self.end_time)


class Roster(BaseModel):
    """A published seven-day schedule of work shifts."""

    model_config = ConfigDict(frozen=True)

    name: str
    week_start_date: datetime.date
    published_at: datetime.datetime
    shifts: tuple[WorkShift, ...] = ()

    @property
    def week_end_date(self) -> datetime.date:
        return self.week_start_date + datetime.timedelta(days=ROSTER_DAYS - 1)

    def covers(self, day: datetime.date) -> bool:
        return self.week_start_date <= day <= self.week_end_date

    @field_validator("published_at")
    @classmethod
    def _to_utc(cls, value: datetime.datetime) -> datetime.datetime:
        # Naive timestamps are read as UTC so rosters from any source sort together
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)

    @model_validator(mode="after")
    def _check_shifts(self) -> "Roster":
        seen: set[tuple[str, datetime.date]] = set()
        for shift in self.shifts:
            if not self.covers(shift.date):
                raise ValueError(
                    f"Shift for {shift.barber_id} on {shift.date} falls outside roster "
                    f"week {self.week_start_date}..{self.week_end_date}"
                )
            key = (shift.barber_id, shift.date)
            if key in seen:
                raise ValueError(
                    f"Duplicate shift for {shift.barber_id} on {shift.date} in roster {self.name!r}"
                )
            seen.add(key)
        return self

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Roster":
        """
        Build a roster from the booking app's JSON shape.

        Expected keys: ``name``, ``startDate``, ``endDate`` (optional),
        ``publishedAt``/``updatedAt``/``createdAt`` and ``days``, a list of
        ``{"date", "shifts": [{"barberId", "startTime", "endTime", "isDayOff"}]}``.

        Individual shift entries that cannot be modelled are skipped with a
        warning. Problems with the roster itself raise ``ValueError``.
        """
        name = str(payload.get("name") or "unnamed roster")

        raw_start = payload.get("startDate") or payload.get("weekStartDate")
        if not raw_start:
            raise ValueError(f"Roster {name!r} has no start date")
        week_start = parse_date(raw_start)

        raw_end = payload.get("endDate")
        if raw_end:
            expected_end = week_start + datetime.timedelta(days=ROSTER_DAYS - 1)
            if parse_date(raw_end) != expected_end:
                raise ValueError(
                    f"Roster {name!r} must span {ROSTER_DAYS} days: "
                    f"{week_start} to {expected_end}, got end {raw_end}"
                )

        published = (
            payload.get("publishedAt") or payload.get("updatedAt") or payload.get("createdAt")
        )
        if not published:
            raise ValueError(f"Roster {name!r} has no publish timestamp")

        shifts: list[WorkShift] = []
        seen: set[tuple[str, datetime.date]] = set()
        for day in payload.get("days") or []:
            if not isinstance(day, dict):
                continue
            for raw in day.get("shifts") or []:
                try:
                    shift = WorkShift(
                        barber_id=raw.get("barberId"),
                        date=day.get("date"),
                        start_time=raw.get("startTime"),
                        end_time=raw.get("endTime"),
                        is_off=bool(raw.get("isDayOff", False)),
                    )
                except (ValidationError, AttributeError) as exc:
                    logger.warning("Skipping malformed shift in roster %r: %s", name, exc)
                    continue

                if not week_start <= shift.date <= week_start + datetime.timedelta(days=ROSTER_DAYS - 1):
                    logger.warning(
                        "Skipping shift for %s on %s outside roster %r week",
                        shift.barber_id, shift.date, name,
                    )
                    continue
                key = (shift.barber_id, shift.date)
                if key in seen:
                    logger.warning(
                        "Ignoring duplicate shift for %s on %s in roster %r",
                        shift.barber_id, shift.date, name,
                    )
                    continue
                seen.add(key)
                shifts.append(shift)

        return cls(
            name=name,
            week_start_date=week_start,
            published_at=published,
            shifts=tuple(shifts),
        )
