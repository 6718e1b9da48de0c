"""
Bookable start-time generation.

Candidates are laid on a fixed wall-clock grid (``slot_step_minutes``)
from the start of the working window. A candidate survives when the
whole requested duration fits before the window ends, it is not a
hidden hour, and it does not overlap an active booking. Intervals are
half-open, so a booking ending at 10:30 leaves a 10:30 start free.

Usage:
    generator = SlotGenerator(RosterAvailability(rosters), bookings, catalog)
    result = await generator.generate_slots(SlotQuery(barber_id="b1", date=day))
    result.slots   # ("09:00", "09:30", ...)
    result.status  # SlotStatus.OK / DEGRADED / UNKNOWN
"""

import asyncio
from typing import Iterable, Optional, Sequence

from chairtime.config import SchedulingConfig, settings
from chairtime.logging_context import get_query_logger
from chairtime.scheduling.roster import AvailabilityUnknown, RosterAvailability
from chairtime.schemas.availability_schema import SlotResult, SlotStatus
from chairtime.schemas.booking_schema import BookedInterval, SlotQuery
from chairtime.schemas.roster_schema import WorkingWindow
from chairtime.sources.base import (
    BarberSettingsSource,
    BookingSource,
    DataSourceUnavailable,
    ServiceCatalog,
)
from chairtime.utils import format_time_of_day

logger = get_query_logger(__name__)


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap: touching endpoints do not count."""
    return start_a < end_b and start_b < end_a


def total_duration(
    service_ids: Sequence[str], durations: dict[str, int], default_minutes: int
) -> int:
    """
    Sum the durations of the requested services.

    No services means one default-length booking. An unknown service, or
    one with a zero/negative duration, counts as the default.
    """
    if not service_ids:
        return default_minutes

    total = 0
    for service_id in service_ids:
        minutes = durations.get(service_id)
        if not minutes or minutes <= 0:
            logger.warning(
                "Service %r has no usable duration; counting %d minutes",
                service_id, default_minutes,
            )
            minutes = default_minutes
        total += minutes
    return total


def compute_slot_starts(
    window: WorkingWindow,
    booked: Iterable[tuple[int, int]],
    duration: int,
    step: int,
    hidden: Iterable[int] = (),
) -> list[int]:
    """
    Start minutes inside ``window`` that can host ``duration`` minutes.

    ``booked`` holds half-open ``(start, end)`` spans. Output is ascending
    and duplicate-free.
    """
    if duration < 1:
        raise ValueError(f"duration must be >= 1 minute, got {duration}")
    if step < 1:
        raise ValueError(f"step must be >= 1 minute, got {step}")

    busy = sorted(booked)
    hidden_starts = set(hidden)
    starts: list[int] = []

    t = window.start
    while t + duration <= window.end:
        end = t + duration
        if t in hidden_starts:
            logger.debug("Candidate %d hidden", t)
        elif any(overlaps(t, end, b_start, b_end) for b_start, b_end in busy):
            logger.debug("Candidate %d collides with a booking", t)
        else:
            starts.append(t)
        t += step
    return starts


class SlotGenerator:
    """Combines the roster window, bookings and service catalog into slots."""

    def __init__(
        self,
        rosters: RosterAvailability,
        bookings: BookingSource,
        catalog: ServiceCatalog,
        barber_settings: Optional[BarberSettingsSource] = None,
        config: Optional[SchedulingConfig] = None,
    ) -> None:
        self._rosters = rosters
        self._bookings = bookings
        self._catalog = catalog
        self._barber_settings = barber_settings
        self._config = config or settings.scheduling

    async def generate_slots(self, query: SlotQuery) -> SlotResult:
        """
        Produce the bookable start times for ``query``.

        Never raises for data problems: a down booking source or catalog
        triggers one retry at the default duration (``DEGRADED``), and a
        second failure yields an empty ``UNKNOWN`` result.
        """
        try:
            lookup = await self._rosters.lookup(query.barber_id, query.date)
        except AvailabilityUnknown as exc:
            return self._unknown(query, f"roster unavailable: {exc.cause}")

        status = SlotStatus.DEGRADED if lookup.assumed else SlotStatus.OK
        reason = lookup.reason
        window = lookup.window
        if window is None:
            logger.info("%s not working on %s; no slots", query.barber_id, query.date)
            return SlotResult(
                barber_id=query.barber_id,
                date=query.date,
                status=status,
                reason=reason,
            )

        try:
            starts, duration = await self._compute(query, window)
        except DataSourceUnavailable as exc:
            logger.warning(
                "Slot lookup for %s on %s failed (%s); retrying at default duration",
                query.barber_id, query.date, exc,
            )
            try:
                starts, duration = await self._compute(query.without_services(), window)
            except DataSourceUnavailable as retry_exc:
                logger.warning(
                    "Retry for %s on %s failed (%s); availability unknown",
                    query.barber_id, query.date, retry_exc,
                )
                return self._unknown(query, str(retry_exc))
            status = SlotStatus.DEGRADED
            reason = f"{exc}; slots computed at default duration"

        logger.info(
            "%d slots for %s on %s (%d min, %s)",
            len(starts), query.barber_id, query.date, duration, status.value,
        )
        return SlotResult(
            barber_id=query.barber_id,
            date=query.date,
            status=status,
            duration_minutes=duration,
            slots=tuple(self.render(m) for m in starts),
            minutes=tuple(starts),
            reason=reason,
            window=window,
        )

    def render(self, minutes: int) -> str:
        return format_time_of_day(minutes, self._config.slot_display_format.value)

    async def _compute(
        self, query: SlotQuery, window: WorkingWindow
    ) -> tuple[list[int], int]:
        durations, booked, hidden = await asyncio.gather(
            self._service_durations(query.service_ids),
            self._bookings.fetch_booked_intervals(query.barber_id, query.date),
            self._hidden_hours(query.barber_id),
        )
        duration = total_duration(
            query.service_ids, durations, self._config.default_service_minutes
        )
        spans = self._busy_spans(query, booked)
        starts = compute_slot_starts(
            window, spans, duration, self._config.slot_step_minutes, hidden
        )
        return starts, duration

    def _busy_spans(
        self, query: SlotQuery, booked: Iterable[BookedInterval]
    ) -> list[tuple[int, int]]:
        return [
            b.span(self._config.default_booking_minutes)
            for b in booked
            if b.is_active and b.barber_id == query.barber_id and b.date == query.date
        ]

    async def _service_durations(self, service_ids: Sequence[str]) -> dict[str, int]:
        if not service_ids:
            return {}
        return await self._catalog.fetch_service_durations(service_ids)

    async def _hidden_hours(self, barber_id: str) -> list[int]:
        if self._barber_settings is None:
            return []
        try:
            return await self._barber_settings.fetch_hidden_hours(barber_id)
        except DataSourceUnavailable as exc:
            logger.warning("Hidden hours for %s unavailable (%s); ignoring", barber_id, exc)
            return []

    @staticmethod
    def _unknown(query: SlotQuery, reason: str) -> SlotResult:
        return SlotResult(
            barber_id=query.barber_id,
            date=query.date,
            status=SlotStatus.UNKNOWN,
            reason=reason,
        )
