"""
Read-only data-source contracts consumed by the availability engine.

In production these would be backed by the booking backend's HTTP API
or database. Every implementation signals an outage by raising
``DataSourceUnavailable``; anything else is a bug and propagates.
"""

import datetime
from typing import Iterable, Protocol, runtime_checkable

from chairtime.schemas.booking_schema import BookedInterval
from chairtime.schemas.roster_schema import Roster


class DataSourceUnavailable(Exception):
    """Raised when a data source cannot be reached or answered garbage."""

    def __init__(self, source: str, detail: str = "") -> None:
        self.source = source
        self.detail = detail
        message = f"{source} unavailable"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@runtime_checkable
class RosterSource(Protocol):
    async def fetch_rosters(
        self, start: datetime.date, end: datetime.date
    ) -> list[Roster]:
        """Return every roster whose week intersects ``start..end`` (inclusive)."""
        ...


@runtime_checkable
class BookingSource(Protocol):
    async def fetch_booked_intervals(
        self, barber_id: str, date: datetime.date
    ) -> list[BookedInterval]:
        """Return the bookings held by ``barber_id`` on ``date``, any status."""
        ...


@runtime_checkable
class ServiceCatalog(Protocol):
    async def fetch_service_durations(self, service_ids: Iterable[str]) -> dict[str, int]:
        """Map each known service id to its duration in minutes. Unknown ids are omitted."""
        ...


@runtime_checkable
class BarberSettingsSource(Protocol):
    async def fetch_hidden_hours(self, barber_id: str) -> list[int]:
        """Start times (minutes since midnight) the barber has hidden from booking."""
        ...
