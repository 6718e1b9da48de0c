"""
Offline console demo: paints a barber's date picker and slot list.

Runs the real roster resolution and slot generation against seeded
in-memory data. No backend, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --barber b2 --services skin-fade,beard-trim
    python console_demo.py --date 2025-06-12 --outage bookings
"""

import argparse
import asyncio
import datetime
import sys
from typing import Optional

from chairtime.config import settings
from chairtime.scheduling.service import AvailabilityService
from chairtime.schemas.availability_schema import DateStatus, SlotStatus
from chairtime.sources.memory import DEMO_BARBERS, DEMO_SERVICES, build_demo_sources
from chairtime.utils import format_time_of_day

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

_STATUS_COLOURS = {
    DateStatus.AVAILABLE: GREEN,
    DateStatus.UNAVAILABLE: DIM,
    DateStatus.UNKNOWN: RED,
}


def _build_service(outage: Optional[str]) -> AvailabilityService:
    rosters, bookings, catalog, barber_settings = build_demo_sources()
    sources = {"roster": rosters, "bookings": bookings, "catalog": catalog}
    if outage:
        sources[outage].available = False
    return AvailabilityService(rosters, bookings, catalog, barber_settings)


async def _run(args: argparse.Namespace) -> int:
    service = _build_service(args.outage)
    barber_name = DEMO_BARBERS.get(args.barber, args.barber)
    service_ids = [s for s in args.services.split(",") if s] if args.services else []
    style = settings.scheduling.slot_display_format.value

    print(f"{BOLD}{settings.shop.name}{RESET} | availability for {barber_name}")
    if service_ids:
        names = ", ".join(DEMO_SERVICES.get(s, {}).get("name", s) for s in service_ids)
        print(f"{DIM}  services: {names}{RESET}")

    dates = await service.get_available_dates(args.barber, days=args.days)
    print(f"\n{BOLD}Next {args.days} days{RESET}")
    for entry in dates:
        colour = _STATUS_COLOURS[entry.status]
        hours = ""
        if entry.window is not None:
            hours = (
                f" {format_time_of_day(entry.window.start, style)}"
                f"-{format_time_of_day(entry.window.end, style)}"
            )
        print(f"  {colour}{entry.date:%a %d %b} {entry.status.value}{hours}{RESET}")

    if all(entry.status == DateStatus.UNKNOWN for entry in dates):
        print(f"\n{RED}Could not check availability: {dates[0].reason}{RESET}")
        return 1

    chosen = args.date or next((d.date.isoformat() for d in dates if d.available), None)
    if chosen is None:
        print(f"\n{YELLOW}No workable dates in range.{RESET}")
        return 0

    result = await service.get_available_slots(args.barber, chosen, service_ids)
    print(f"\n{BOLD}Slots on {chosen}{RESET} ({result.duration_minutes or '-'} min)")
    if result.status == SlotStatus.UNKNOWN:
        print(f"  {RED}Could not check availability: {result.reason}{RESET}")
        return 1
    if result.status == SlotStatus.DEGRADED:
        print(f"  {YELLOW}Degraded: {result.reason}{RESET}")
    if not result:
        print(f"  {DIM}No slots available.{RESET}")
    for slot in result:
        print(f"  {GREEN}{slot}{RESET}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Barber availability console demo")
    parser.add_argument("--barber", default="b1", help=f"one of {', '.join(DEMO_BARBERS)}")
    parser.add_argument("--date", help="YYYY-MM-DD (default: first workable date)")
    parser.add_argument("--services", default="", help="comma-separated service ids")
    parser.add_argument("--days", type=int, default=settings.scheduling.horizon_days)
    parser.add_argument(
        "--outage",
        choices=["roster", "bookings", "catalog"],
        help="simulate an unreachable data source",
    )
    args = parser.parse_args()

    if args.date:
        try:
            datetime.date.fromisoformat(args.date)
        except ValueError:
            parser.error(f"invalid date: {args.date}")

    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
