from chairtime.scheduling.roster import (
    AvailabilityUnknown,
    RosterAvailability,
    RosterIndex,
    WindowLookup,
)
from chairtime.scheduling.service import AvailabilityService
from chairtime.scheduling.slots import (
    SlotGenerator,
    compute_slot_starts,
    overlaps,
    total_duration,
)

__all__ = [
    "AvailabilityService",
    "AvailabilityUnknown",
    "RosterAvailability",
    "RosterIndex",
    "SlotGenerator",
    "WindowLookup",
    "compute_slot_starts",
    "overlaps",
    "total_duration",
]
