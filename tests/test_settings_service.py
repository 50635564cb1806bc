"""Tests for SettingsService delivery tuning."""

import json

import pytest

from services.delivery_controller import DeliveryConfig
from services.settings_service import (
    SettingsService,
    get_settings_service,
    reset_settings_service,
)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "card_list_settings.json"


def test_missing_file_uses_defaults(settings_path):
    service = SettingsService(settings_path)

    assert service.load() == {}
    assert service.build_delivery_config() == DeliveryConfig()


def test_corrupt_file_uses_defaults(settings_path):
    settings_path.write_text("{broken", encoding="utf-8")

    assert SettingsService(settings_path).load() == {}


def test_non_object_file_uses_defaults(settings_path):
    settings_path.write_text("[1, 2, 3]", encoding="utf-8")

    assert SettingsService(settings_path).load() == {}


def test_values_are_read_from_file(settings_path):
    settings_path.write_text(
        json.dumps({"initial_window_size": 40, "base_batch_size": 10, "cooldown_seconds": 0.25}),
        encoding="utf-8",
    )

    config = SettingsService(settings_path).build_delivery_config()

    assert config.initial_window_size == 40
    assert config.base_batch_size == 10
    assert config.cooldown_seconds == 0.25


def test_values_are_clamped():
    config = SettingsService().build_delivery_config(
        {
            "initial_window_size": 0,
            "prefetch_fan_out": 1000,
            "cooldown_seconds": -1,
            "batch_increment": "lots",
        }
    )

    assert config.initial_window_size == 1
    assert config.prefetch_fan_out == 32
    assert config.cooldown_seconds == 0.0
    assert config.batch_increment == 5


def test_inverted_batch_bounds_are_repaired():
    config = SettingsService().build_delivery_config({"min_batch_size": 40, "max_batch_size": 10})

    assert config.min_batch_size == 40
    assert config.max_batch_size == 40
    assert config.base_batch_size == 40


def test_clamp_helpers():
    assert SettingsService.clamp_int("7.9", default=1, min_value=0, max_value=10) == 7
    assert SettingsService.clamp_int(None, default=3, min_value=0, max_value=10) == 3
    assert SettingsService.clamp_float("2.5", default=0.0, min_value=0.0, max_value=1.0) == 1.0


def test_get_settings_service_singleton():
    first = get_settings_service()

    assert get_settings_service() is first
    reset_settings_service()
    assert get_settings_service() is not first


def test_infinite_values_land_on_bounds(settings_path):
    settings_path.write_text(
        '{"initial_window_size": 1e999, "prefetch_fan_out": -1e999, "cooldown_seconds": NaN}',
        encoding="utf-8",
    )

    config = SettingsService(settings_path).build_delivery_config()

    assert config.initial_window_size == 500
    assert config.prefetch_fan_out == 1
    assert config.cooldown_seconds == 0.1


def test_clamp_helpers_non_finite():
    assert SettingsService.clamp_int(float("inf"), default=1, min_value=0, max_value=10) == 10
    assert SettingsService.clamp_int(float("nan"), default=3, min_value=0, max_value=10) == 3
    assert SettingsService.clamp_int(10**400, default=1, min_value=0, max_value=10) == 10
    assert SettingsService.clamp_float(float("inf"), default=0.0, min_value=0.0, max_value=5.0) == 5.0
