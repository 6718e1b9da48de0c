"""Shared test fixtures and helpers."""

import datetime
from dataclasses import replace
from typing import Optional

import pytest

from chairtime.config import RosterFetchErrorPolicy, SchedulingConfig, SlotDisplayFormat
from chairtime.scheduling.roster import RosterAvailability
from chairtime.scheduling.service import AvailabilityService
from chairtime.scheduling.slots import SlotGenerator
from chairtime.schemas.booking_schema import BookedInterval, BookingStatus
from chairtime.schemas.roster_schema import Roster, WorkShift
from chairtime.sources.memory import (
    InMemoryBarberSettings,
    InMemoryBookingSource,
    InMemoryRosterSource,
    InMemoryServiceCatalog,
)
from chairtime.utils import format_time_of_day, parse_time_of_day

WEEK_START = datetime.date(2025, 6, 9)  # Monday
TUESDAY = datetime.date(2025, 6, 10)
WEDNESDAY = datetime.date(2025, 6, 11)
THURSDAY = datetime.date(2025, 6, 12)
FRIDAY = datetime.date(2025, 6, 13)
CHRISTMAS = datetime.date(2025, 12, 25)

SERVICE_DURATIONS = {
    "cut": 30,
    "fade": 45,
    "beard": 15,
    "colour": 90,
    "free-consult": 0,
}


def make_config(**overrides) -> SchedulingConfig:
    """Scheduling config pinned to known values, independent of the environment."""
    base = SchedulingConfig(
        slot_step_minutes=30,
        default_service_minutes=30,
        default_booking_minutes=60,
        on_roster_fetch_error=RosterFetchErrorPolicy.PROPAGATE_UNKNOWN,
        fallback_day_start="09:00",
        fallback_day_end="18:00",
        horizon_days=14,
        slot_display_format=SlotDisplayFormat.H24,
    )
    return replace(base, **overrides)


def make_roster(
    shifts: list[WorkShift],
    name: str = "Week 24",
    week_start: datetime.date = WEEK_START,
    published_at: Optional[datetime.datetime] = None,
) -> Roster:
    return Roster(
        name=name,
        week_start_date=week_start,
        published_at=published_at or datetime.datetime(2025, 6, 1, 9, 0),
        shifts=tuple(shifts),
    )


def shift(
    barber_id: str,
    date: datetime.date,
    start: Optional[str] = "09:00",
    end: Optional[str] = "17:00",
    is_off: bool = False,
) -> WorkShift:
    return WorkShift(barber_id=barber_id, date=date, start_time=start, end_time=end, is_off=is_off)


def booking(
    start: str,
    minutes: Optional[int],
    barber_id: str = "b1",
    date: datetime.date = TUESDAY,
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> BookedInterval:
    return BookedInterval(
        barber_id=barber_id, date=date, start_time=start, duration_minutes=minutes, status=status
    )


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def week_roster():
    return make_roster([
        shift("b1", TUESDAY),
        shift("b1", WEDNESDAY, is_off=True),
        shift("b1", THURSDAY, start="17:00", end="09:00"),
        shift("b1", FRIDAY, start=None, end=None),
        shift("b2", TUESDAY, start="10:00", end="18:00"),
    ])


@pytest.fixture
def roster_source(week_roster):
    return InMemoryRosterSource([week_roster])


@pytest.fixture
def booking_source():
    return InMemoryBookingSource()


@pytest.fixture
def catalog():
    return InMemoryServiceCatalog(SERVICE_DURATIONS)


@pytest.fixture
def barber_settings():
    return InMemoryBarberSettings()


@pytest.fixture
def roster_availability(roster_source, config):
    return RosterAvailability(roster_source, config)


@pytest.fixture
def generator(roster_availability, booking_source, catalog, barber_settings, config):
    return SlotGenerator(roster_availability, booking_source, catalog, barber_settings, config)


@pytest.fixture
def service(roster_source, booking_source, catalog, barber_settings, config):
    return AvailabilityService(roster_source, booking_source, catalog, barber_settings, config)


def hhmm_range(start: str, last: str, step: int = 30) -> list[str]:
    """Expected slot strings from ``start`` to ``last`` inclusive."""
    first, final = parse_time_of_day(start), parse_time_of_day(last)
    return [format_time_of_day(m) for m in range(first, final + 1, step)]
