"""Filter criteria value objects shared by the filter engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from utils.card_record import CardCategory, CardPack, ElementType, EvolutionStage


class CriterionKind(str, Enum):
    TEXT = "text"
    CATEGORY = "category"
    EVOLUTION_STAGE = "evolution_stage"
    ELEMENT_TYPE = "element_type"
    PACK = "pack"
    HP = "hp"
    MAX_DAMAGE = "max_damage"
    MAX_ENERGY_COST = "max_energy_cost"
    RETREAT_COST = "retreat_cost"


class ComparisonKind(str, Enum):
    NONE = "none"
    LESS_OR_EQUAL = "le"
    EQUAL = "eq"
    GREATER_OR_EQUAL = "ge"


MEMBERSHIP_KINDS = frozenset(
    {
        CriterionKind.CATEGORY,
        CriterionKind.EVOLUTION_STAGE,
        CriterionKind.ELEMENT_TYPE,
        CriterionKind.PACK,
    }
)
NUMERIC_KINDS = frozenset(
    {
        CriterionKind.HP,
        CriterionKind.MAX_DAMAGE,
        CriterionKind.MAX_ENERGY_COST,
        CriterionKind.RETREAT_COST,
    }
)


@dataclass(frozen=True)
class NumericPredicate:
    comparison: ComparisonKind = ComparisonKind.NONE
    value: int = 0

    @property
    def enabled(self) -> bool:
        return self.comparison is not ComparisonKind.NONE


@dataclass(frozen=True)
class FilterCriteria:
    """Current conjunction of predicates. Empty sets and NONE comparisons are disabled."""

    text: str = ""
    categories: frozenset[CardCategory] = field(default_factory=frozenset)
    evolution_stages: frozenset[EvolutionStage] = field(default_factory=frozenset)
    element_types: frozenset[ElementType] = field(default_factory=frozenset)
    packs: frozenset[CardPack] = field(default_factory=frozenset)
    hp: NumericPredicate = NumericPredicate()
    max_damage: NumericPredicate = NumericPredicate()
    max_energy_cost: NumericPredicate = NumericPredicate()
    retreat_cost: NumericPredicate = NumericPredicate()

    @property
    def is_empty(self) -> bool:
        return self == FilterCriteria()


# CriterionKind -> FilterCriteria attribute
CRITERIA_FIELDS: dict[CriterionKind, str] = {
    CriterionKind.TEXT: "text",
    CriterionKind.CATEGORY: "categories",
    CriterionKind.EVOLUTION_STAGE: "evolution_stages",
    CriterionKind.ELEMENT_TYPE: "element_types",
    CriterionKind.PACK: "packs",
    CriterionKind.HP: "hp",
    CriterionKind.MAX_DAMAGE: "max_damage",
    CriterionKind.MAX_ENERGY_COST: "max_energy_cost",
    CriterionKind.RETREAT_COST: "retreat_cost",
}

__all__ = [
    "CRITERIA_FIELDS",
    "ComparisonKind",
    "CriterionKind",
    "FilterCriteria",
    "MEMBERSHIP_KINDS",
    "NUMERIC_KINDS",
    "NumericPredicate",
]
