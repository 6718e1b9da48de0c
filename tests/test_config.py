"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from chairtime.config import (
    AppConfig,
    RosterFetchErrorPolicy,
    SchedulingConfig,
    ShopConfig,
    SlotDisplayFormat,
    _safe_choice,
    _safe_int,
    _validate_config,
)
from tests.conftest import make_config


def _app(**scheduling_overrides) -> AppConfig:
    return AppConfig(
        shop=ShopConfig(),
        scheduling=make_config(**scheduling_overrides),
        log_level="INFO",
    )


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_pinned_test_config_passes_validation(self):
        _validate_config(_app())

    @pytest.mark.parametrize("step", [0, -15, 7, 50])
    def test_invalid_slot_step(self, step):
        with pytest.raises(ValueError, match="SLOT_STEP_MINUTES"):
            _validate_config(_app(slot_step_minutes=step))

    @pytest.mark.parametrize("step", [5, 10, 15, 20, 30, 60])
    def test_valid_slot_steps(self, step):
        _validate_config(_app(slot_step_minutes=step))

    def test_invalid_default_service_minutes(self):
        with pytest.raises(ValueError, match="DEFAULT_SERVICE_MINUTES"):
            _validate_config(_app(default_service_minutes=0))

    def test_invalid_default_booking_minutes(self):
        with pytest.raises(ValueError, match="DEFAULT_BOOKING_MINUTES"):
            _validate_config(_app(default_booking_minutes=-5))

    def test_invalid_horizon(self):
        with pytest.raises(ValueError, match="BOOKING_HORIZON_DAYS"):
            _validate_config(_app(horizon_days=0))

    def test_unparseable_fallback_start(self):
        with pytest.raises(ValueError, match="FALLBACK_DAY_START"):
            _validate_config(_app(fallback_day_start="nine"))

    def test_fallback_window_must_be_ordered(self):
        with pytest.raises(ValueError, match="before FALLBACK_DAY_END"):
            _validate_config(_app(fallback_day_start="18:00", fallback_day_end="09:00"))

    def test_config_is_frozen(self):
        config = make_config()
        with pytest.raises(Exception):
            config.slot_step_minutes = 15  # type: ignore[misc]


class TestEnvParsing:
    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("CHAIRTIME_TEST_INT", "thirty")
        with pytest.raises(ValueError, match="CHAIRTIME_TEST_INT"):
            _safe_int("CHAIRTIME_TEST_INT", "30")

    def test_safe_choice_default(self):
        policy = _safe_choice("NONEXISTENT_VAR_12345", "assume_open", RosterFetchErrorPolicy)
        assert policy == RosterFetchErrorPolicy.ASSUME_OPEN

    def test_safe_choice_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CHAIRTIME_TEST_FMT", " 12H ")
        assert _safe_choice("CHAIRTIME_TEST_FMT", "24h", SlotDisplayFormat) == SlotDisplayFormat.H12

    def test_safe_choice_lists_allowed_values(self, monkeypatch):
        monkeypatch.setenv("CHAIRTIME_TEST_POLICY", "maybe")
        with pytest.raises(ValueError, match="assume_open, assume_closed, propagate_unknown"):
            _safe_choice("CHAIRTIME_TEST_POLICY", "assume_open", RosterFetchErrorPolicy)

    def test_replace_keeps_other_fields(self):
        config = replace(SchedulingConfig(), slot_step_minutes=15)
        assert config.slot_step_minutes == 15
        assert config.default_booking_minutes == SchedulingConfig().default_booking_minutes
