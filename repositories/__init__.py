"""
Repositories package - Data access layer.

This package contains repository classes that handle card catalog loading and
retrieval, isolating the services from data access details.
"""

from repositories.card_repository import (
    CardRepository,
    get_card_repository,
    parse_card_payload,
    reset_card_repository,
)

__all__ = [
    "CardRepository",
    "get_card_repository",
    "parse_card_payload",
    "reset_card_repository",
]
