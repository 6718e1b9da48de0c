"""Tests for the console demo's exit codes."""

import argparse

import pytest

import console_demo


def _args(**overrides) -> argparse.Namespace:
    values = {"barber": "b1", "date": None, "services": "", "days": 5, "outage": None}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestConsoleDemo:
    @pytest.mark.asyncio
    async def test_healthy_run_exits_zero(self, capsys):
        assert await console_demo._run(_args(days=7)) == 0
        assert "Slots on" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_roster_outage_exits_nonzero(self, capsys):
        assert await console_demo._run(_args(outage="roster")) == 1
        out = capsys.readouterr().out
        assert "Could not check availability" in out
        assert "No workable dates" not in out

    @pytest.mark.asyncio
    async def test_booking_outage_on_chosen_date_exits_nonzero(self, capsys):
        assert await console_demo._run(_args(days=7, outage="bookings")) == 1
        assert "Could not check availability" in capsys.readouterr().out
