"""
Roster-derived working windows.

Answers "does barber B work on date D, and between which hours?" from
the published rosters. Bad shift data never raises: it resolves to
"not working". Only an unreachable roster source is treated specially,
according to the configured ``RosterFetchErrorPolicy``.

Usage:
    rosters = RosterAvailability(source)
    window = await rosters.get_working_window("b1", date(2025, 6, 10))
    if window is None:
        ...  # not working
"""

import datetime
from dataclasses import dataclass
from typing import Iterable, Optional

from chairtime.config import RosterFetchErrorPolicy, SchedulingConfig, settings
from chairtime.logging_context import get_query_logger
from chairtime.schemas.roster_schema import Roster, WorkingWindow, WorkShift
from chairtime.sources.base import DataSourceUnavailable, RosterSource
from chairtime.utils import parse_date, parse_time_of_day

logger = get_query_logger(__name__)


class AvailabilityUnknown(Exception):
    """Raised when availability cannot be determined and the policy says not to guess."""

    def __init__(self, barber_id: str, date: datetime.date, cause: Exception) -> None:
        self.barber_id = barber_id
        self.date = date
        self.cause = cause
        super().__init__(f"Availability unknown for {barber_id} on {date}: {cause}")


@dataclass(frozen=True)
class WindowLookup:
    """
    Outcome of one roster lookup.

    ``outage`` is set when the roster source was down and the window (or
    its absence) comes from the fetch-error policy rather than a roster.
    """

    window: Optional[WorkingWindow] = None
    outage: Optional[DataSourceUnavailable] = None

    @property
    def assumed(self) -> bool:
        return self.outage is not None

    @property
    def reason(self) -> str:
        if self.outage is None:
            return "" if self.window is not None else "not scheduled to work"
        guess = "assumed shop hours" if self.window is not None else "assumed closed"
        return f"roster unavailable ({self.outage}); {guess}"


class RosterIndex:
    """
    Effective shift per (barber, date) across overlapping rosters.

    Rosters are folded in ascending publish order (name breaks ties), so
    a shift from a later publish replaces an earlier one for the same
    barber and date.
    """

    def __init__(self, rosters: Iterable[Roster]) -> None:
        self._shifts: dict[tuple[str, datetime.date], WorkShift] = {}
        for roster in sorted(rosters, key=lambda r: (r.published_at, r.name)):
            for shift in roster.shifts:
                self._shifts[(shift.barber_id, shift.date)] = shift

    def __len__(self) -> int:
        return len(self._shifts)

    def shift_for(self, barber_id: str, date: datetime.date) -> Optional[WorkShift]:
        return self._shifts.get((barber_id, date))

    def window_for(self, barber_id: str, date: datetime.date) -> Optional[WorkingWindow]:
        shift = self.shift_for(barber_id, date)
        if shift is None:
            return None
        return shift.working_window()


class RosterAvailability:
    """Resolves working windows from a roster source."""

    def __init__(
        self, source: RosterSource, config: Optional[SchedulingConfig] = None
    ) -> None:
        self._source = source
        self._config = config or settings.scheduling

    async def get_working_window(
        self, barber_id: str, date: datetime.date
    ) -> Optional[WorkingWindow]:
        """
        Return the barber's window on ``date``, or ``None`` when not working.

        Raises:
            AvailabilityUnknown: the roster source is down and the policy
                is ``propagate_unknown``.
        """
        return (await self.lookup(barber_id, date)).window

    async def lookup(self, barber_id: str, date: datetime.date) -> WindowLookup:
        """Like ``get_working_window`` but records whether the answer was guessed."""
        day = parse_date(date)
        try:
            rosters = await self._source.fetch_rosters(day, day)
        except DataSourceUnavailable as exc:
            return self._on_fetch_error(barber_id, day, exc)

        index = RosterIndex(rosters)
        shift = index.shift_for(barber_id, day)
        if shift is None:
            logger.debug("No shift for %s on %s", barber_id, day)
            return WindowLookup()
        if shift.is_off:
            logger.debug("%s is off on %s", barber_id, day)
            return WindowLookup()

        window = shift.working_window()
        if window is None:
            logger.warning(
                "Unusable shift for %s on %s (start=%s end=%s); treating as not working",
                barber_id, day, shift.start_time, shift.end_time,
            )
        return WindowLookup(window=window)

    async def is_available(self, barber_id: str, date: datetime.date) -> bool:
        """True iff a working window resolves. Unknown counts as unavailable."""
        try:
            return await self.get_working_window(barber_id, date) is not None
        except AvailabilityUnknown:
            return False

    def _on_fetch_error(
        self, barber_id: str, day: datetime.date, exc: DataSourceUnavailable
    ) -> WindowLookup:
        policy = self._config.on_roster_fetch_error

        if policy == RosterFetchErrorPolicy.ASSUME_OPEN:
            logger.warning(
                "Roster fetch failed for %s on %s (%s); assuming open %s-%s",
                barber_id, day, exc,
                self._config.fallback_day_start, self._config.fallback_day_end,
            )
            return WindowLookup(window=self.fallback_window(), outage=exc)

        if policy == RosterFetchErrorPolicy.ASSUME_CLOSED:
            logger.warning(
                "Roster fetch failed for %s on %s (%s); assuming closed", barber_id, day, exc
            )
            return WindowLookup(outage=exc)

        logger.warning("Roster fetch failed for %s on %s (%s); availability unknown",
                       barber_id, day, exc)
        raise AvailabilityUnknown(barber_id, day, exc) from exc

    def fallback_window(self) -> WorkingWindow:
        """Shop hours used when the roster cannot be read and the policy assumes open."""
        return WorkingWindow(
            start=parse_time_of_day(self._config.fallback_day_start),
            end=parse_time_of_day(self._config.fallback_day_end),
            assumed=True,
        )
