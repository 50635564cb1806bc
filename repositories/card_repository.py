"""
Card Repository - Data access layer for the card catalog.

This module handles all catalog data access including:
- Loading the card JSON from the remote host or a local file
- Ordered access to every card (catalog order is the load order)
- Lookup by card id
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from curl_cffi import requests
from loguru import logger

from utils.card_record import CardRecord
from utils.constants import CARDS_CACHE_FILE, CARDS_JSON_URL, REQUEST_TIMEOUT


class CardRepository:
    """Read-only card catalog shared by every filter engine."""

    def __init__(self, cards: Iterable[CardRecord] | None = None):
        """
        Initialize the card repository.

        Args:
            cards: Records to serve. If None, the catalog stays unloaded until
                one of the load methods succeeds.
        """
        self._cards: list[CardRecord] | None = None
        self._cards_by_id: dict[str, CardRecord] = {}
        if cards is not None:
            self.set_cards(cards)

    # ============= Catalog Access =============

    def get_all(self) -> list[CardRecord]:
        """Return every card in catalog order (empty while unloaded)."""
        return list(self._cards or [])

    def get_by_key(self, card_id: str) -> CardRecord | None:
        """Return the card with the given id, or None."""
        return self._cards_by_id.get(card_id)

    def is_loaded(self) -> bool:
        """Check if a catalog has been loaded."""
        return self._cards is not None

    def __len__(self) -> int:
        return len(self._cards or [])

    def set_cards(self, cards: Iterable[CardRecord]) -> None:
        """
        Replace the catalog.

        Cards without a category are kept but logged, duplicate ids keep the
        first occurrence.
        """
        records: list[CardRecord] = []
        by_id: dict[str, CardRecord] = {}
        missing_category = 0
        for card in cards:
            if card.id in by_id:
                logger.warning(f"Duplicate card id {card.id!r} ({card.name}); keeping first entry")
                continue
            if card.category is None:
                missing_category += 1
                logger.warning(f"Card has no category: {card.name or card.id}")
            by_id[card.id] = card
            records.append(card)

        self._cards = records
        self._cards_by_id = by_id
        if not records:
            logger.warning("Card catalog is empty")
        logger.info(
            f"Card catalog ready: {len(records)} cards ({missing_category} without category)"
        )

    # ============= Loading =============

    def load_from_file(self, path: Path) -> bool:
        """
        Load the catalog from a local card JSON file.

        Returns:
            True if loaded successfully, False otherwise
        """
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to read card data from {path}: {exc}")
            return False
        self.set_cards(parse_card_payload(payload))
        return True

    def load_from_url(
        self,
        url: str = CARDS_JSON_URL,
        fallback_path: Path | None = CARDS_CACHE_FILE,
    ) -> bool:
        """
        Load the catalog from the remote card JSON, falling back to a local copy.

        A successful download refreshes the local copy.

        Returns:
            True if a catalog was loaded from either source, False otherwise
        """
        try:
            resp = requests.get(url, impersonate="chrome", timeout=REQUEST_TIMEOUT)
            resp.raise_for_status()
            payload = resp.json()
        except Exception as exc:
            logger.warning(f"Failed to download card data from {url}: {exc}")
            if fallback_path is not None and Path(fallback_path).exists():
                logger.info(f"Using local card data: {fallback_path}")
                return self.load_from_file(fallback_path)
            logger.error("No card data available")
            return False

        self.set_cards(parse_card_payload(payload))
        if fallback_path is not None:
            self._write_cache(Path(fallback_path), payload)
        return True

    def _write_cache(self, path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning(f"Unable to cache card data at {path}: {exc}")


def parse_card_payload(payload: Any) -> list[CardRecord]:
    """Accept either a bare list of cards or an object with a ``cards`` list."""
    if isinstance(payload, dict):
        payload = payload.get("cards", [])
    if not isinstance(payload, list):
        logger.warning(f"Unexpected card data payload: {type(payload).__name__}")
        return []
    return [CardRecord.from_dict(entry) for entry in payload if isinstance(entry, dict)]


# Global instance
_default_repository = None


def get_card_repository() -> CardRepository:
    """Get the default card repository instance."""
    global _default_repository
    if _default_repository is None:
        _default_repository = CardRepository()
    return _default_repository


def reset_card_repository() -> None:
    """
    Reset the global card repository instance.

    This is primarily useful for testing to ensure test isolation
    and prevent state leakage between tests.
    """
    global _default_repository
    _default_repository = None
