from chairtime.sources.base import (
    BarberSettingsSource,
    BookingSource,
    DataSourceUnavailable,
    RosterSource,
    ServiceCatalog,
)
from chairtime.sources.memory import (
    InMemoryBarberSettings,
    InMemoryBookingSource,
    InMemoryRosterSource,
    InMemoryServiceCatalog,
    build_demo_sources,
)

__all__ = [
    "RosterSource",
    "BookingSource",
    "ServiceCatalog",
    "BarberSettingsSource",
    "DataSourceUnavailable",
    "InMemoryRosterSource",
    "InMemoryBookingSource",
    "InMemoryServiceCatalog",
    "InMemoryBarberSettings",
    "build_demo_sources",
]
