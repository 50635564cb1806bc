"""
Card List Service - Connects search input, filtering and incremental delivery.

Text search and the filter form each own a FilterEngine over the same catalog.
Every new result list resets the delivery controller; scroll events from the
card list feed it.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger

from repositories.card_repository import CardRepository, get_card_repository
from services.delivery_controller import (
    DeliveryConfig,
    IncrementalDeliveryController,
    ViewNotifier,
)
from services.filter_engine import FilterEngine
from services.resource_prefetcher import ResourcePrefetcher
from services.settings_service import get_settings_service
from utils.card_images import CardImageLoader, placeholder_image
from utils.card_record import CardRecord
from utils.constants import IMAGE_CACHE_DIR
from utils.filter_criteria import CriterionKind


class CardListService:
    """Routes search results to the card list view."""

    def __init__(
        self,
        catalog: CardRepository,
        prefetcher: ResourcePrefetcher,
        view: ViewNotifier,
        config: DeliveryConfig | None = None,
    ) -> None:
        self.catalog = catalog
        self.search_engine = FilterEngine(catalog)
        self.form_engine = FilterEngine(catalog)
        self.controller = IncrementalDeliveryController(prefetcher, view, config)

    async def show_all(self) -> list[CardRecord]:
        """Show the whole catalog, dropping any text query."""
        results = self.search_engine.clear_all()
        await self.controller.reset(results)
        return results

    async def search_text(self, text: str) -> list[CardRecord]:
        """Search names and move effects; a blank query shows every card."""
        results = self.search_engine.set_criterion(CriterionKind.TEXT, text) or []
        logger.debug(f"Text search {text!r}: {len(results)} cards")
        await self.controller.reset(results)
        return results

    async def apply_filters(self, updates: Mapping[CriterionKind | str, Any]) -> list[CardRecord]:
        """Apply several form criteria with a single recompute, then show the result."""
        with self.form_engine.batch():
            for kind, value in updates.items():
                self.form_engine.set_criterion(kind, value)
        results = self.form_engine.filtered_cards
        logger.debug(f"Form search: {len(results)} cards")
        await self.controller.reset(results)
        return results

    async def clear_filters(self) -> list[CardRecord]:
        results = self.form_engine.clear_all()
        await self.controller.reset(results)
        return results

    async def on_scroll(self, position: float, timestamp: float | None = None) -> bool:
        return await self.controller.on_consumption_signal(position, timestamp)


def build_card_list_service(
    view: ViewNotifier,
    *,
    catalog: CardRepository | None = None,
    image_dir: Path = IMAGE_CACHE_DIR,
    config: DeliveryConfig | None = None,
) -> CardListService:
    """Wire a card list service with the default catalog, image loader and settings."""
    prefetcher = ResourcePrefetcher(CardImageLoader(image_dir), placeholder=placeholder_image())
    if config is None:
        config = get_settings_service().build_delivery_config()
    return CardListService(catalog or get_card_repository(), prefetcher, view, config)


__all__ = ["CardListService", "build_card_list_service"]
