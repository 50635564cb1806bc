"""Test helper utilities for managing global state in tests.

This module provides utilities for resetting global service and repository
instances to ensure test isolation, plus small builders shared by the tests.
"""

import sys
from pathlib import Path
from typing import Any

# Add parent directory to sys.path to enable imports from repositories and services
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

# ruff: noqa: E402
from repositories.card_repository import reset_card_repository
from services.settings_service import reset_settings_service
from utils.card_record import (
    CardCategory,
    CardPack,
    CardRecord,
    ElementType,
    EvolutionStage,
    Move,
)


def reset_all_services() -> None:
    """Reset all global service instances."""
    reset_settings_service()


def reset_all_repositories() -> None:
    """Reset all global repository instances."""
    reset_card_repository()


def reset_all_globals() -> None:
    """Reset all global service and repository instances.

    Call in test teardown to keep tests isolated from each other.
    """
    reset_all_services()
    reset_all_repositories()


def make_card(card_id: str = "c1", name: str = "Test Card", **overrides: Any) -> CardRecord:
    """Helper to create a creature card with sensible defaults."""
    fields: dict[str, Any] = {
        "category": CardCategory.NON_EX,
        "evolution_stage": EvolutionStage.BASIC,
        "element_type": ElementType.GRASS,
        "pack": CardPack.GENETIC_APEX,
        "hp": 70,
        "max_damage": 30,
        "max_energy_cost": 2,
        "retreat_cost": 1,
        "moves": (Move("Tackle", "Deal damage."),),
        "resource_key": f"img-{card_id}",
    }
    fields.update(overrides)
    return CardRecord(id=card_id, name=name, **fields)


class RecordingView:
    """View that records every reset/append notification in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, list[str]]] = []

    def on_reset(self, items: list[CardRecord]) -> None:
        self.events.append(("reset", [card.id for card in items]))

    def on_append(self, items: list[CardRecord]) -> None:
        self.events.append(("append", [card.id for card in items]))

    @property
    def displayed(self) -> list[str]:
        shown: list[str] = []
        for kind, ids in self.events:
            if kind == "reset":
                shown = list(ids)
            else:
                shown.extend(ids)
        return shown

    def appended_since(self, index: int) -> list[str]:
        return [card_id for kind, ids in self.events[index:] if kind == "append" for card_id in ids]
