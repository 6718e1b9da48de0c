"""Roster-aware slot availability for salon and barbershop bookings."""

from chairtime.scheduling import AvailabilityService, RosterAvailability, SlotGenerator

__all__ = ["AvailabilityService", "RosterAvailability", "SlotGenerator"]
