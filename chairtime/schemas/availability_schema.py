"""Caller-facing availability results."""

import datetime
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from chairtime.schemas.roster_schema import WorkingWindow


class DateStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class SlotStatus(str, Enum):
    """How trustworthy a slot list is."""

    OK = "ok"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


class DateAvailability(BaseModel):
    """Whether a barber works on one date."""

    barber_id: str
    date: datetime.date
    status: DateStatus
    window: Optional[WorkingWindow] = None
    reason: str = ""
    # Set when the roster was unreachable and the status is a policy guess
    assumed: bool = False

    @property
    def available(self) -> bool:
        return self.status == DateStatus.AVAILABLE


@dataclass(frozen=True)
class SlotResult(Sequence):
    """
    Bookable start times for one barber and date.

    Iterates over the rendered slot strings. ``status`` separates
    "no slots" (``OK`` with an empty list) from "could not check"
    (``UNKNOWN``).
    """

    barber_id: str
    date: datetime.date
    status: SlotStatus
    duration_minutes: Optional[int] = None
    slots: tuple[str, ...] = ()
    minutes: tuple[int, ...] = ()
    reason: str = ""
    window: Optional[WorkingWindow] = field(default=None, compare=False)

    def __getitem__(self, index):
        return self.slots[index]

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def known(self) -> bool:
        return self.status != SlotStatus.UNKNOWN

    @property
    def degraded(self) -> bool:
        return self.status == SlotStatus.DEGRADED
