#!/usr/bin/env python3
"""Load the card catalog, run a search and stream the results the way the card list does."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from loguru import logger

from repositories.card_repository import get_card_repository
from services.card_list_service import CardListService, build_card_list_service
from utils.card_record import CardRecord
from utils.constants import CARDS_JSON_URL, IMAGE_CACHE_DIR, LOGS_DIR, ensure_base_dirs
from utils.logging_config import configure_logging


class ConsoleView:
    """Card list view that reports deliveries to the log."""

    def __init__(self) -> None:
        self.shown: list[CardRecord] = []

    def on_reset(self, items: list[CardRecord]) -> None:
        self.shown = list(items)
        logger.info(f"Showing {len(items)} cards")

    def on_append(self, items: list[CardRecord]) -> None:
        self.shown.extend(items)
        logger.info(f"Appended {', '.join(card.name for card in items)}")


async def browse(service: CardListService, query: str, scrolls: int) -> int:
    """Search, then scroll ``scrolls`` times; returns the number of cards shown."""
    if query:
        await service.search_text(query)
    else:
        await service.show_all()
    position = 0.0
    for _ in range(scrolls):
        if service.controller.pending_count == 0:
            break
        position += 1.0
        await service.on_scroll(position)
        # let the cooldown pass between simulated scrolls
        await asyncio.sleep(service.controller.config.cooldown_seconds)
    return service.controller.delivered_count


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("query", nargs="?", default="", help="Text to search for")
    parser.add_argument("--cards", type=Path, help="Local card JSON instead of the remote catalog")
    parser.add_argument("--url", default=CARDS_JSON_URL, help="Remote card JSON URL")
    parser.add_argument("--image-dir", type=Path, default=IMAGE_CACHE_DIR)
    parser.add_argument("--scrolls", type=int, default=3, help="Simulated scroll events")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    ensure_base_dirs()
    configure_logging(LOGS_DIR, args.log_level)

    repository = get_card_repository()
    if args.cards:
        loaded = repository.load_from_file(args.cards)
    else:
        loaded = repository.load_from_url(args.url)
    if not loaded:
        logger.error("Card catalog could not be loaded")
        return 1

    view = ConsoleView()
    service = build_card_list_service(view, catalog=repository, image_dir=args.image_dir)
    delivered = asyncio.run(browse(service, args.query, max(0, args.scrolls)))
    print(f"{delivered} of {service.controller.total_count} matching cards shown")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
