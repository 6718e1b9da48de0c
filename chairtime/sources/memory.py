"""
In-memory data sources.

Used by tests and the console demo. In production these would be
replaced by clients for the booking backend; the engine only sees the
protocols in ``chairtime.sources.base``.
"""

import datetime
import logging
from typing import Iterable, Optional

from chairtime.schemas.booking_schema import BookedInterval, BookingStatus
from chairtime.schemas.roster_schema import Roster, WorkShift
from chairtime.sources.base import DataSourceUnavailable
from chairtime.utils import parse_time_of_day

logger = logging.getLogger(__name__)


class _Switchable:
    """Shared outage switch and call counter."""

    name = "source"

    def __init__(self) -> None:
        self.available = True
        self.calls = 0

    def _touch(self) -> None:
        self.calls += 1
        if not self.available:
            raise DataSourceUnavailable(self.name, "simulated outage")


class InMemoryRosterSource(_Switchable):
    name = "roster source"

    def __init__(self, rosters: Optional[Iterable[Roster]] = None) -> None:
        super().__init__()
        self._rosters: list[Roster] = list(rosters or [])

    def publish(self, roster: Roster) -> None:
        self._rosters.append(roster)
        logger.debug("Roster %r published for week of %s", roster.name, roster.week_start_date)

    async def fetch_rosters(
        self, start: datetime.date, end: datetime.date
    ) -> list[Roster]:
        self._touch()
        return [
            r for r in self._rosters
            if r.week_start_date <= end and r.week_end_date >= start
        ]


class InMemoryBookingSource(_Switchable):
    name = "booking source"

    def __init__(self, bookings: Optional[Iterable[BookedInterval]] = None) -> None:
        super().__init__()
        self._bookings: list[BookedInterval] = list(bookings or [])

    def add(self, booking: BookedInterval) -> None:
        self._bookings.append(booking)

    async def fetch_booked_intervals(
        self, barber_id: str, date: datetime.date
    ) -> list[BookedInterval]:
        self._touch()
        return [b for b in self._bookings if b.barber_id == barber_id and b.date == date]


class InMemoryServiceCatalog(_Switchable):
    name = "service catalog"

    def __init__(self, durations: Optional[dict[str, int]] = None) -> None:
        super().__init__()
        self._durations: dict[str, int] = dict(durations or {})

    async def fetch_service_durations(self, service_ids: Iterable[str]) -> dict[str, int]:
        self._touch()
        return {sid: self._durations[sid] for sid in service_ids if sid in self._durations}


class InMemoryBarberSettings(_Switchable):
    name = "barber settings"

    def __init__(self, hidden_hours: Optional[dict[str, list[str]]] = None) -> None:
        super().__init__()
        self._hidden: dict[str, list[int]] = {
            barber_id: [parse_time_of_day(t) for t in times]
            for barber_id, times in (hidden_hours or {}).items()
        }

    async def fetch_hidden_hours(self, barber_id: str) -> list[int]:
        self._touch()
        return list(self._hidden.get(barber_id, []))


# ── Demo data ────────────────────────────────────────────────────────────

DEMO_SERVICES: dict[str, dict] = {
    "classic-cut": {"name": "Classic Cut", "duration": 30},
    "skin-fade": {"name": "Skin Fade", "duration": 45},
    "beard-trim": {"name": "Beard Trim", "duration": 15},
    "hot-towel-shave": {"name": "Hot Towel Shave", "duration": 30},
    "cut-and-colour": {"name": "Cut & Colour", "duration": 90},
}

DEMO_BARBERS: dict[str, str] = {
    "b1": "Marco",
    "b2": "Aisha",
    "b3": "Liam",
}

# weekday -> (start, end); missing weekday = day off
_DEMO_WEEK: dict[str, dict[int, tuple[str, str]]] = {
    "b1": {1: ("09:00", "17:00"), 2: ("09:00", "17:00"), 3: ("09:00", "17:00"),
           4: ("12:00", "20:00"), 5: ("09:00", "15:00")},
    "b2": {0: ("10:00", "18:00"), 2: ("10:00", "18:00"), 3: ("10:00", "18:00"),
           4: ("10:00", "18:00"), 5: ("08:00", "14:00")},
    "b3": {1: ("13:00", "21:00"), 3: ("13:00", "21:00"), 5: ("09:00", "17:00")},
}


def _demo_roster(week_start: datetime.date, published_at: datetime.datetime) -> Roster:
    shifts = []
    for offset in range(7):
        day = week_start + datetime.timedelta(days=offset)
        for barber_id, week in _DEMO_WEEK.items():
            hours = week.get(day.weekday())
            if hours is None:
                shifts.append(WorkShift(barber_id=barber_id, date=day, is_off=True))
            else:
                shifts.append(
                    WorkShift(barber_id=barber_id, date=day, start_time=hours[0], end_time=hours[1])
                )
    return Roster(
        name=f"Week of {week_start.isoformat()}",
        week_start_date=week_start,
        published_at=published_at,
        shifts=tuple(shifts),
    )


def build_demo_sources(
    today: Optional[datetime.date] = None, weeks: int = 3
) -> tuple[InMemoryRosterSource, InMemoryBookingSource, InMemoryServiceCatalog, InMemoryBarberSettings]:
    """Seed a few weeks of rosters and bookings starting from this week's Monday."""
    today = today or datetime.date.today()
    monday = today - datetime.timedelta(days=today.weekday())
    published = datetime.datetime.combine(monday, datetime.time(8, 0))

    rosters = InMemoryRosterSource(
        _demo_roster(monday + datetime.timedelta(weeks=w), published) for w in range(weeks)
    )

    tomorrow = today + datetime.timedelta(days=1)
    bookings = InMemoryBookingSource([
        BookedInterval(barber_id="b1", date=tomorrow, start_time="10:00", duration_minutes=45),
        BookedInterval(barber_id="b1", date=tomorrow, start_time="13:30", duration_minutes=90),
        BookedInterval(barber_id="b1", date=tomorrow, start_time="15:00", duration_minutes=30,
                       status=BookingStatus.CANCELLED),
        BookedInterval(barber_id="b2", date=tomorrow, start_time="11:00", duration_minutes=30,
                       status=BookingStatus.PENDING),
    ])
    catalog = InMemoryServiceCatalog({sid: info["duration"] for sid, info in DEMO_SERVICES.items()})
    barber_settings = InMemoryBarberSettings({"b2": ["5:30 PM"]})
    return rosters, bookings, catalog, barber_settings
