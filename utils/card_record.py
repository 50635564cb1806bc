"""Card record model and the enumerations used by the search filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from loguru import logger

E = TypeVar("E", bound=Enum)


class CardCategory(str, Enum):
    NON_EX = "non_ex"
    EX = "ex"
    SUPPORTER = "supporter"
    ITEM = "item"
    TOOL = "tool"
    FOSSIL = "fossil"


class EvolutionStage(str, Enum):
    BASIC = "basic"
    STAGE_1 = "stage_1"
    STAGE_2 = "stage_2"


class ElementType(str, Enum):
    GRASS = "grass"
    FIRE = "fire"
    WATER = "water"
    LIGHTNING = "lightning"
    PSYCHIC = "psychic"
    FIGHTING = "fighting"
    DARKNESS = "darkness"
    METAL = "metal"
    DRAGON = "dragon"
    COLORLESS = "colorless"


class CardPack(str, Enum):
    GENETIC_APEX = "genetic_apex"
    MYTHICAL_ISLAND = "mythical_island"
    SPACE_TIME_SMACKDOWN = "space_time_smackdown"
    TRIUMPHANT_LIGHT = "triumphant_light"
    PROMO = "promo"


# Only creature cards carry an evolution stage, an element type and a retreat cost
CREATURE_CATEGORIES = frozenset({CardCategory.NON_EX, CardCategory.EX})

# Labels used by the upstream card JSON
_UPSTREAM_LABELS: dict[type[Enum], dict[str, Enum]] = {
    CardCategory: {
        "非EX": CardCategory.NON_EX,
        "EX": CardCategory.EX,
        "サポート": CardCategory.SUPPORTER,
        "グッズ": CardCategory.ITEM,
        "ポケモンのどうぐ": CardCategory.TOOL,
        "化石": CardCategory.FOSSIL,
    },
    EvolutionStage: {
        "たね": EvolutionStage.BASIC,
        "1進化": EvolutionStage.STAGE_1,
        "2進化": EvolutionStage.STAGE_2,
    },
    ElementType: {
        "草": ElementType.GRASS,
        "炎": ElementType.FIRE,
        "水": ElementType.WATER,
        "雷": ElementType.LIGHTNING,
        "超": ElementType.PSYCHIC,
        "闘": ElementType.FIGHTING,
        "悪": ElementType.DARKNESS,
        "鋼": ElementType.METAL,
        "ドラゴン": ElementType.DRAGON,
        "無色": ElementType.COLORLESS,
    },
    CardPack: {
        "最強の遺伝子": CardPack.GENETIC_APEX,
        "幻のいる島": CardPack.MYTHICAL_ISLAND,
        "時空の激闘": CardPack.SPACE_TIME_SMACKDOWN,
        "超克の光": CardPack.TRIUMPHANT_LIGHT,
        "PROMO": CardPack.PROMO,
    },
}


def parse_enum(enum_cls: type[E], value: Any) -> E | None:
    """
    Convert a raw label into a member of ``enum_cls``.

    Accepts members, English values (case-insensitive) and upstream labels.
    Returns None for empty or unknown labels.
    """
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return enum_cls(text.lower())
    except ValueError:
        pass
    member = _UPSTREAM_LABELS.get(enum_cls, {}).get(text)
    if member is None:
        logger.debug(f"Unknown {enum_cls.__name__} label: {text!r}")
    return member  # type: ignore[return-value]


def coerce_stat(value: Any) -> int:
    """Parse a numeric stat; missing, malformed or negative values become 0."""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, number)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class Move:
    name: str
    effect: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        return cls(name=str(data.get("name") or ""), effect=str(data.get("effect") or ""))


@dataclass
class CardRecord:
    """A single card of the catalog.

    Everything except ``resource_handle`` is fixed once the catalog is loaded.
    The handle is filled in by the resource prefetcher and only cached here.
    """

    id: str
    name: str
    category: CardCategory | None = None
    evolution_stage: EvolutionStage | None = None
    element_type: ElementType | None = None
    pack: CardPack | None = None
    hp: int = 0
    max_damage: int = 0
    max_energy_cost: int = 0
    retreat_cost: int = 0
    moves: tuple[Move, ...] = ()
    resource_key: str = ""
    resource_handle: Any = field(default=None, compare=False, repr=False)

    @property
    def is_creature(self) -> bool:
        return self.category in CREATURE_CATEGORIES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardRecord:
        """Build a record from one entry of the card JSON (camelCase or snake_case keys)."""
        raw_moves = data.get("moves") or []
        moves = tuple(Move.from_dict(move) for move in raw_moves if isinstance(move, dict))
        return cls(
            id=str(_pick(data, "id", "card_id") or ""),
            name=str(data.get("name") or ""),
            category=parse_enum(CardCategory, _pick(data, "cardType", "card_type", "category")),
            evolution_stage=parse_enum(
                EvolutionStage, _pick(data, "evolutionStage", "evolution_stage")
            ),
            element_type=parse_enum(ElementType, _pick(data, "type", "element_type")),
            pack=parse_enum(CardPack, data.get("pack")),
            hp=coerce_stat(data.get("hp")),
            max_damage=coerce_stat(_pick(data, "maxDamage", "max_damage")),
            max_energy_cost=coerce_stat(_pick(data, "maxEnergyCost", "max_energy_cost")),
            retreat_cost=coerce_stat(_pick(data, "retreatCost", "retreat_cost")),
            moves=moves,
            resource_key=str(_pick(data, "imageKey", "image_key", "resource_key") or ""),
        )


__all__ = [
    "CREATURE_CATEGORIES",
    "CardCategory",
    "CardPack",
    "CardRecord",
    "ElementType",
    "EvolutionStage",
    "Move",
    "coerce_stat",
    "parse_enum",
]
