"""Tests for the card record model and label parsing."""

from utils.card_record import (
    CardCategory,
    CardPack,
    CardRecord,
    ElementType,
    EvolutionStage,
    Move,
    coerce_stat,
    parse_enum,
)


def test_parse_enum_accepts_members_values_and_labels():
    assert parse_enum(CardCategory, CardCategory.EX) is CardCategory.EX
    assert parse_enum(CardCategory, "Supporter") is CardCategory.SUPPORTER
    assert parse_enum(CardCategory, "グッズ") is CardCategory.ITEM
    assert parse_enum(EvolutionStage, "1進化") is EvolutionStage.STAGE_1
    assert parse_enum(ElementType, "雷") is ElementType.LIGHTNING
    assert parse_enum(CardPack, "幻のいる島") is CardPack.MYTHICAL_ISLAND


def test_parse_enum_unknown_or_empty_returns_none():
    assert parse_enum(CardCategory, "") is None
    assert parse_enum(CardCategory, None) is None
    assert parse_enum(ElementType, "unknown") is None


def test_coerce_stat():
    assert coerce_stat("120") == 120
    assert coerce_stat(2.0) == 2
    assert coerce_stat(-3) == 0
    assert coerce_stat(None) == 0
    assert coerce_stat("n/a") == 0


def test_from_dict_upstream_entry():
    """Test building a record from a camelCase upstream entry."""
    card = CardRecord.from_dict(
        {
            "id": "a1-094",
            "name": "ピカチュウ",
            "cardType": "非EX",
            "evolutionStage": "たね",
            "type": "雷",
            "pack": "最強の遺伝子",
            "hp": 60,
            "maxDamage": "30",
            "maxEnergyCost": 2,
            "retreatCost": 1,
            "moves": [{"name": "Gnaw", "effect": ""}, "not a move"],
            "imageKey": "a1-094",
        }
    )

    assert card.id == "a1-094"
    assert card.category is CardCategory.NON_EX
    assert card.evolution_stage is EvolutionStage.BASIC
    assert card.element_type is ElementType.LIGHTNING
    assert card.pack is CardPack.GENETIC_APEX
    assert (card.hp, card.max_damage, card.max_energy_cost, card.retreat_cost) == (60, 30, 2, 1)
    assert card.moves == (Move("Gnaw", ""),)
    assert card.resource_key == "a1-094"
    assert card.resource_handle is None
    assert card.is_creature is True


def test_from_dict_snake_case_trainer():
    card = CardRecord.from_dict(
        {"card_id": "p-1", "name": "Potion", "card_type": "item", "image_key": "potion"}
    )

    assert card.id == "p-1"
    assert card.category is CardCategory.ITEM
    assert card.evolution_stage is None
    assert card.hp == 0
    assert card.is_creature is False
    assert card.resource_key == "potion"


def test_resource_handle_is_ignored_by_equality():
    first = CardRecord(id="x", name="X")
    second = CardRecord(id="x", name="X", resource_handle=object())

    assert first == second


def test_coerce_stat_non_finite_values():
    assert coerce_stat(float("inf")) == 0
    assert coerce_stat(float("-inf")) == 0
    assert coerce_stat(float("nan")) == 0
    assert coerce_stat(10**400) == 0
