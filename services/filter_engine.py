"""
Filter Engine - Multi-predicate card filtering over a shared catalog.

This module owns the current filter criteria and evaluates them against the
catalog:
- Text search over card names and move effects (case and kana insensitive)
- Category, evolution stage, element type and pack selections
- HP, max damage, max energy cost and retreat cost comparisons
- Batched criterion updates that recompute once
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from enum import Enum
from typing import Any, Protocol

from loguru import logger

from utils.card_record import (
    CardCategory,
    CardPack,
    CardRecord,
    ElementType,
    EvolutionStage,
    parse_enum,
)
from utils.filter_criteria import (
    CRITERIA_FIELDS,
    MEMBERSHIP_KINDS,
    NUMERIC_KINDS,
    ComparisonKind,
    CriterionKind,
    FilterCriteria,
    NumericPredicate,
)
from utils.search_filters import (
    matches_comparison,
    matches_membership,
    matches_range,
    matches_text,
    normalize_search_text,
)
from utils.service_config import (
    HP_RANGE,
    MAX_DAMAGE_RANGE,
    MAX_ENERGY_COST_RANGE,
    RETREAT_COST_RANGE,
)

_MEMBERSHIP_ENUMS: dict[CriterionKind, type[Enum]] = {
    CriterionKind.CATEGORY: CardCategory,
    CriterionKind.EVOLUTION_STAGE: EvolutionStage,
    CriterionKind.ELEMENT_TYPE: ElementType,
    CriterionKind.PACK: CardPack,
}


class CatalogProvider(Protocol):
    def get_all(self) -> list[CardRecord]: ...


class FilterEngine:
    """Holds one set of filter criteria and applies it to the catalog."""

    def __init__(self, catalog: CatalogProvider | None):
        """
        Initialize the filter engine.

        Args:
            catalog: Card catalog to filter. Several engines may share one.
        """
        self._catalog = catalog
        self._criteria = FilterCriteria()
        self._filtered: list[CardRecord] = []
        self._in_batch = False
        self.recompute_count = 0

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def filtered_cards(self) -> list[CardRecord]:
        """Result of the last recompute."""
        return list(self._filtered)

    @property
    def in_batch(self) -> bool:
        return self._in_batch

    # ============= Criteria Updates =============

    def set_criterion(self, kind: CriterionKind | str, value: Any) -> list[CardRecord] | None:
        """
        Update one predicate.

        Args:
            kind: Which predicate to update
            value: Text for TEXT, an iterable of members or labels for the
                selection kinds, a ``NumericPredicate`` or ``(comparison, value)``
                pair (or None to disable) for the numeric kinds

        Returns:
            The new filtered list, or None while a batch is open

        Raises:
            ValueError: If ``kind`` is not a known criterion
        """
        kind = CriterionKind(kind)
        coerced = self._coerce_value(kind, value)
        self._criteria = replace(self._criteria, **{CRITERIA_FIELDS[kind]: coerced})
        if self._in_batch:
            return None
        return self.apply()

    def begin_batch(self) -> None:
        """Defer recomputes until ``end_batch``."""
        self._in_batch = True

    def end_batch(self) -> list[CardRecord]:
        """Close the batch and recompute exactly once."""
        self._in_batch = False
        return self.apply()

    @contextmanager
    def batch(self) -> Iterator[FilterEngine]:
        self.begin_batch()
        try:
            yield self
        finally:
            self.end_batch()

    def clear_all(self) -> list[CardRecord]:
        """Disable every predicate and return the whole catalog."""
        self._criteria = FilterCriteria()
        return self.apply()

    def _coerce_value(self, kind: CriterionKind, value: Any) -> Any:
        if kind is CriterionKind.TEXT:
            return "" if value is None else str(value)
        if kind in MEMBERSHIP_KINDS:
            return _coerce_selection(_MEMBERSHIP_ENUMS[kind], value)
        if kind in NUMERIC_KINDS:
            return _coerce_numeric(kind, value)
        raise ValueError(f"Unsupported criterion: {kind}")  # pragma: no cover

    # ============= Evaluation =============

    def apply(self) -> list[CardRecord]:
        """Scan the catalog once and keep every card matching all enabled predicates."""
        cards = self._load_catalog()
        criteria = self._criteria
        query = normalize_search_text(criteria.text.strip())
        self._filtered = [card for card in cards if _matches(card, criteria, query)]
        self.recompute_count += 1
        logger.debug(f"Filters applied: {len(cards)} cards, {len(self._filtered)} after filtering")
        return list(self._filtered)

    def matches(self, card: CardRecord) -> bool:
        """Check a single card against the current criteria."""
        query = normalize_search_text(self._criteria.text.strip())
        return _matches(card, self._criteria, query)

    def search_ranges(
        self,
        *,
        categories: Iterable[Any] | None = None,
        evolution_stages: Iterable[Any] | None = None,
        element_types: Iterable[Any] | None = None,
        packs: Iterable[Any] | None = None,
        hp: tuple[int, int] = HP_RANGE,
        max_damage: tuple[int, int] = MAX_DAMAGE_RANGE,
        max_energy_cost: tuple[int, int] = MAX_ENERGY_COST_RANGE,
        retreat_cost: tuple[int, int] = RETREAT_COST_RANGE,
    ) -> list[CardRecord]:
        """
        Stateless min/max search used by the form panel.

        Does not touch the engine criteria. A numeric range only filters when it
        narrows its default bounds.
        """
        selection = FilterCriteria(
            categories=_coerce_selection(CardCategory, categories),
            evolution_stages=_coerce_selection(EvolutionStage, evolution_stages),
            element_types=_coerce_selection(ElementType, element_types),
            packs=_coerce_selection(CardPack, packs),
        )
        ranges = (
            ("hp", hp, HP_RANGE),
            ("max_damage", max_damage, MAX_DAMAGE_RANGE),
            ("max_energy_cost", max_energy_cost, MAX_ENERGY_COST_RANGE),
            ("retreat_cost", retreat_cost, RETREAT_COST_RANGE),
        )

        results: list[CardRecord] = []
        for card in self._load_catalog():
            if not _matches_selection(card, selection):
                continue
            if all(
                matches_range(getattr(card, attr), low, high, *defaults)
                for attr, (low, high), defaults in ranges
            ):
                results.append(card)
        return results

    def _load_catalog(self) -> list[CardRecord]:
        if self._catalog is None:
            logger.warning("No card catalog available; filter results are empty")
            return []
        try:
            cards = self._catalog.get_all()
        except Exception as exc:
            logger.error(f"Failed to read card catalog: {exc}")
            return []
        if not cards:
            logger.warning("Card catalog is empty")
        return cards


def _matches(card: CardRecord, criteria: FilterCriteria, query: str) -> bool:
    if not matches_text(query, card.name, (move.effect for move in card.moves)):
        return False
    if not _matches_selection(card, criteria):
        return False

    hp = criteria.hp
    if hp.enabled and hp.value > 0:
        # Cards without HP never match an HP comparison
        if card.hp <= 0 or not matches_comparison(card.hp, hp.value, hp.comparison):
            return False

    for predicate, card_value in (
        (criteria.max_damage, card.max_damage),
        (criteria.max_energy_cost, card.max_energy_cost),
    ):
        if predicate.enabled and not matches_comparison(
            card_value, predicate.value, predicate.comparison
        ):
            return False

    retreat = criteria.retreat_cost
    if retreat.enabled:
        if not card.is_creature:
            return False
        if not matches_comparison(card.retreat_cost, retreat.value, retreat.comparison):
            return False
    return True


def _matches_selection(card: CardRecord, criteria: FilterCriteria) -> bool:
    if not matches_membership(card.category, criteria.categories):
        return False
    # Stage and element are only defined for creature cards
    if criteria.evolution_stages and not card.is_creature:
        return False
    if not matches_membership(card.evolution_stage, criteria.evolution_stages):
        return False
    if criteria.element_types and not card.is_creature:
        return False
    if not matches_membership(card.element_type, criteria.element_types):
        return False
    return matches_membership(card.pack, criteria.packs)


def _coerce_selection(enum_cls: type[Enum], value: Any) -> frozenset:
    if value is None:
        return frozenset()
    if isinstance(value, (str, Enum)):
        value = [value]
    selected = set()
    for item in value:
        member = parse_enum(enum_cls, item)
        if member is None:
            logger.warning(f"Ignoring unknown {enum_cls.__name__} filter value: {item!r}")
            continue
        selected.add(member)
    return frozenset(selected)


def _coerce_numeric(kind: CriterionKind, value: Any) -> NumericPredicate:
    if value is None:
        return NumericPredicate()
    if isinstance(value, NumericPredicate):
        comparison, number = value.comparison, value.value
    else:
        try:
            comparison, number = value
        except (TypeError, ValueError):
            logger.warning(f"Invalid {kind.value} filter {value!r}; filter disabled")
            return NumericPredicate()

    try:
        comparison = ComparisonKind(comparison)
    except ValueError:
        logger.warning(f"Unknown comparison {comparison!r} for {kind.value}; filter disabled")
        return NumericPredicate()

    try:
        number = int(number)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid {kind.value} value {number!r}; using 0")
        number = 0
    if number < 0:
        logger.debug(f"Clamping negative {kind.value} value {number} to 0")
        number = 0
    return NumericPredicate(comparison, number)


__all__ = ["CatalogProvider", "FilterEngine"]
