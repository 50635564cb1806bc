"""
Services package - Business logic layer.

This package exposes business services while avoiding heavy imports at module load time.
"""

from importlib import import_module
from typing import Any

__all__ = [
    "CardListService",
    "DeliveryConfig",
    "DeliveryState",
    "FilterEngine",
    "IncrementalDeliveryController",
    "ResourcePrefetcher",
    "SettingsService",
    "build_card_list_service",
    "get_settings_service",
]

_LAZY_MODULES = {
    "CardListService": "services.card_list_service",
    "build_card_list_service": "services.card_list_service",
    "DeliveryConfig": "services.delivery_controller",
    "DeliveryState": "services.delivery_controller",
    "IncrementalDeliveryController": "services.delivery_controller",
    "FilterEngine": "services.filter_engine",
    "ResourcePrefetcher": "services.resource_prefetcher",
    "SettingsService": "services.settings_service",
    "get_settings_service": "services.settings_service",
}


def __getattr__(name: str) -> Any:
    if name in _LAZY_MODULES:
        module = import_module(_LAZY_MODULES[name])
        value = getattr(module, name)
        globals()[name] = value
        return value

    raise AttributeError(f"module 'services' has no attribute '{name}'")
