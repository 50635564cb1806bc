from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from loguru import logger

from services.delivery_controller import DeliveryConfig
from utils.constants import CARD_LIST_SETTINGS_FILE
from utils.service_config import (
    BASE_BATCH_SIZE,
    BATCH_SIZE_DECREMENT,
    BATCH_SIZE_INCREMENT,
    BATCH_SIZE_LIMITS,
    COOLDOWN_LIMITS,
    FAN_OUT_LIMITS,
    INITIAL_WINDOW_SIZE,
    MAX_BATCH_SIZE,
    MIN_BATCH_SIZE,
    PREFETCH_FAN_OUT,
    SIGNAL_COOLDOWN_SECONDS,
    SUB_BATCH_SIZE,
    VELOCITY_THRESHOLD,
    WINDOW_SIZE_LIMITS,
)


class SettingsService:
    """Loads card list tuning from the settings file."""

    def __init__(self, settings_path: Path | None = None) -> None:
        self.settings_path = settings_path or CARD_LIST_SETTINGS_FILE

    def load(self) -> dict[str, Any]:
        if not self.settings_path.exists():
            return {}
        try:
            with self.settings_path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Failed to load card list settings: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Card list settings must be a JSON object; using defaults")
            return {}
        return data

    @staticmethod
    def clamp_int(value: Any, *, default: int, min_value: int, max_value: int) -> int:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return max(min_value, min(default, max_value))
        except OverflowError:
            return max_value if value > 0 else min_value
        if math.isnan(number):
            return max(min_value, min(default, max_value))
        # Infinite values land on the matching bound
        if math.isinf(number):
            return max_value if number > 0 else min_value
        return max(min_value, min(int(number), max_value))

    @staticmethod
    def clamp_float(value: Any, *, default: float, min_value: float, max_value: float) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = default
        except OverflowError:
            number = max_value if value > 0 else min_value
        if math.isnan(number):
            number = default
        return max(min_value, min(number, max_value))

    def build_delivery_config(self, settings: dict[str, Any] | None = None) -> DeliveryConfig:
        """Build a delivery config from persisted tuning, clamping every value into range."""
        if settings is None:
            settings = self.load()

        def batch(key: str, default: int) -> int:
            low, high = BATCH_SIZE_LIMITS
            return self.clamp_int(
                settings.get(key, default), default=default, min_value=low, max_value=high
            )

        min_batch = batch("min_batch_size", MIN_BATCH_SIZE)
        max_batch = batch("max_batch_size", MAX_BATCH_SIZE)
        if min_batch > max_batch:
            logger.warning(
                f"min_batch_size {min_batch} exceeds max_batch_size {max_batch}; using {min_batch} for both"
            )
            max_batch = min_batch

        window_low, window_high = WINDOW_SIZE_LIMITS
        fan_low, fan_high = FAN_OUT_LIMITS
        cooldown_low, cooldown_high = COOLDOWN_LIMITS
        return DeliveryConfig(
            initial_window_size=self.clamp_int(
                settings.get("initial_window_size", INITIAL_WINDOW_SIZE),
                default=INITIAL_WINDOW_SIZE,
                min_value=window_low,
                max_value=window_high,
            ),
            base_batch_size=batch("base_batch_size", BASE_BATCH_SIZE),
            min_batch_size=min_batch,
            max_batch_size=max_batch,
            batch_increment=self.clamp_int(
                settings.get("batch_increment", BATCH_SIZE_INCREMENT),
                default=BATCH_SIZE_INCREMENT,
                min_value=0,
                max_value=BATCH_SIZE_LIMITS[1],
            ),
            batch_decrement=self.clamp_int(
                settings.get("batch_decrement", BATCH_SIZE_DECREMENT),
                default=BATCH_SIZE_DECREMENT,
                min_value=0,
                max_value=BATCH_SIZE_LIMITS[1],
            ),
            velocity_threshold=self.clamp_float(
                settings.get("velocity_threshold", VELOCITY_THRESHOLD),
                default=VELOCITY_THRESHOLD,
                min_value=0.0,
                max_value=float("inf"),
            ),
            cooldown_seconds=self.clamp_float(
                settings.get("cooldown_seconds", SIGNAL_COOLDOWN_SECONDS),
                default=SIGNAL_COOLDOWN_SECONDS,
                min_value=cooldown_low,
                max_value=cooldown_high,
            ),
            sub_batch_size=batch("sub_batch_size", SUB_BATCH_SIZE),
            prefetch_fan_out=self.clamp_int(
                settings.get("prefetch_fan_out", PREFETCH_FAN_OUT),
                default=PREFETCH_FAN_OUT,
                min_value=fan_low,
                max_value=fan_high,
            ),
        )


_default_settings_service: SettingsService | None = None


def get_settings_service() -> SettingsService:
    """Return singleton settings service."""
    global _default_settings_service
    if _default_settings_service is None:
        _default_settings_service = SettingsService()
    return _default_settings_service


def reset_settings_service() -> None:
    """Reset the global settings service instance (used by tests)."""
    global _default_settings_service
    _default_settings_service = None


__all__ = ["SettingsService", "get_settings_service", "reset_settings_service"]
