"""
Caller-facing availability API.

Wraps RosterAvailability and SlotGenerator behind the handful of calls
a booking UI needs: paint workable dates, list slots for a chosen date,
and re-check one slot right before a booking is written.
"""

import asyncio
import datetime
from typing import Optional, Sequence, Union

from chairtime.config import SchedulingConfig, settings
from chairtime.logging_context import get_query_logger, new_query_id
from chairtime.scheduling.roster import AvailabilityUnknown, RosterAvailability
from chairtime.scheduling.slots import SlotGenerator
from chairtime.schemas.availability_schema import (
    DateAvailability,
    DateStatus,
    SlotResult,
    SlotStatus,
)
from chairtime.schemas.booking_schema import SlotQuery
from chairtime.sources.base import (
    BarberSettingsSource,
    BookingSource,
    RosterSource,
    ServiceCatalog,
)
from chairtime.utils import parse_date, parse_time_of_day

logger = get_query_logger(__name__)

DateLike = Union[str, datetime.date]


class AvailabilityService:
    """Entry point for availability queries against a set of data sources."""

    def __init__(
        self,
        roster_source: RosterSource,
        booking_source: BookingSource,
        catalog: ServiceCatalog,
        barber_settings: Optional[BarberSettingsSource] = None,
        config: Optional[SchedulingConfig] = None,
    ) -> None:
        self.config = config or settings.scheduling
        self.rosters = RosterAvailability(roster_source, self.config)
        self.slots = SlotGenerator(
            self.rosters, booking_source, catalog, barber_settings, self.config
        )

    async def is_available(self, barber_id: str, date: DateLike) -> bool:
        """Whether the barber works on ``date``. Unknown reads as False."""
        return (await self.check_availability(barber_id, date)).available

    async def check_availability(self, barber_id: str, date: DateLike) -> DateAvailability:
        day = parse_date(date)
        try:
            lookup = await self.rosters.lookup(barber_id, day)
        except AvailabilityUnknown as exc:
            return DateAvailability(
                barber_id=barber_id, date=day, status=DateStatus.UNKNOWN, reason=str(exc.cause)
            )
        status = DateStatus.AVAILABLE if lookup.window is not None else DateStatus.UNAVAILABLE
        return DateAvailability(
            barber_id=barber_id, date=day, status=status, window=lookup.window,
            reason=lookup.reason, assumed=lookup.assumed,
        )

    async def get_available_slots(
        self, barber_id: str, date: DateLike, service_ids: Sequence[str] = ()
    ) -> SlotResult:
        """Ordered bookable start times; check ``status`` before trusting an empty list."""
        new_query_id()
        query = SlotQuery(barber_id=barber_id, date=parse_date(date), service_ids=service_ids)
        logger.debug(
            "Slots for %s on %s services=%s",
            query.barber_id, query.date, list(query.service_ids),
        )
        return await self.slots.generate_slots(query)

    async def get_available_dates(
        self,
        barber_id: str,
        start: Optional[DateLike] = None,
        days: Optional[int] = None,
    ) -> list[DateAvailability]:
        """
        Check ``days`` consecutive dates from ``start`` (default: tomorrow).

        Each date is resolved independently and all are issued at once.
        """
        first = parse_date(start) if start is not None else (
            datetime.date.today() + datetime.timedelta(days=1)
        )
        count = days if days is not None else self.config.horizon_days
        if count < 1:
            raise ValueError(f"days must be >= 1, got {count}")

        new_query_id()
        dates = [first + datetime.timedelta(days=offset) for offset in range(count)]
        results = await asyncio.gather(
            *(self.check_availability(barber_id, day) for day in dates)
        )
        logger.info(
            "%s works %d of %d days from %s",
            barber_id, sum(r.available for r in results), count, first,
        )
        return list(results)

    async def is_slot_available(
        self,
        barber_id: str,
        date: DateLike,
        time: Union[str, int],
        service_ids: Sequence[str] = (),
    ) -> bool:
        """
        Re-validate one start time at booking-write time.

        Only a definite (non-degraded) answer counts as available.
        """
        start = parse_time_of_day(time) if isinstance(time, str) else time
        result = await self.get_available_slots(barber_id, date, service_ids)
        if result.status != SlotStatus.OK:
            logger.warning(
                "Cannot confirm %s for %s on %s: %s", time, barber_id, date, result.reason
            )
            return False
        return start in result.minutes
