"""Tests for CardRepository data access layer."""

import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from test_helpers import make_card

import repositories.card_repository as card_repository_module
from repositories.card_repository import (
    CardRepository,
    get_card_repository,
    parse_card_payload,
    reset_card_repository,
)
from utils.card_record import CardCategory

SAMPLE_PAYLOAD = [
    {"id": "a1-001", "name": "フシギダネ", "cardType": "非EX", "type": "草", "hp": 70},
    {"id": "a1-002", "name": "フシギソウ", "cardType": "非EX", "type": "草", "hp": 90},
    {"id": "a1-219", "name": "エリカ", "cardType": "サポート"},
]


@pytest.fixture
def mock_requests(monkeypatch):
    """Replace the HTTP client used by the repository."""
    response = SimpleNamespace(raise_for_status=Mock(), json=Mock(return_value=SAMPLE_PAYLOAD))
    client = SimpleNamespace(get=Mock(return_value=response))
    monkeypatch.setattr(card_repository_module, "requests", client)
    return client


# ============= Catalog Access Tests =============


def test_unloaded_repository_is_empty():
    repo = CardRepository()

    assert repo.is_loaded() is False
    assert repo.get_all() == []
    assert len(repo) == 0


def test_get_all_preserves_order_and_returns_copy():
    cards = [make_card("c1"), make_card("c2"), make_card("c3")]
    repo = CardRepository(cards)

    result = repo.get_all()
    result.pop()

    assert [card.id for card in repo.get_all()] == ["c1", "c2", "c3"]
    assert repo.get_by_key("c2") is cards[1]
    assert repo.get_by_key("missing") is None


def test_set_cards_skips_duplicate_ids():
    repo = CardRepository([make_card("c1", "First"), make_card("c1", "Second")])

    assert len(repo) == 1
    assert repo.get_by_key("c1").name == "First"


def test_set_cards_keeps_cards_without_category():
    repo = CardRepository([make_card("c1", category=None)])

    assert len(repo) == 1
    assert repo.get_all()[0].category is None


def test_empty_catalog_counts_as_loaded():
    repo = CardRepository([])

    assert repo.is_loaded() is True
    assert repo.get_all() == []


# ============= Loading Tests =============


def test_parse_card_payload_accepts_list_and_object():
    assert len(parse_card_payload(SAMPLE_PAYLOAD)) == 3
    assert len(parse_card_payload({"cards": SAMPLE_PAYLOAD})) == 3
    assert parse_card_payload("bad") == []


def test_load_from_file(tmp_path):
    path = tmp_path / "cards.json"
    path.write_text(json.dumps(SAMPLE_PAYLOAD, ensure_ascii=False), encoding="utf-8")
    repo = CardRepository()

    assert repo.load_from_file(path) is True
    assert [card.id for card in repo.get_all()] == ["a1-001", "a1-002", "a1-219"]
    assert repo.get_by_key("a1-219").category is CardCategory.SUPPORTER


def test_load_from_file_invalid_json(tmp_path):
    path = tmp_path / "cards.json"
    path.write_text("{not json", encoding="utf-8")
    repo = CardRepository()

    assert repo.load_from_file(path) is False
    assert repo.is_loaded() is False


def test_load_from_url_writes_cache(tmp_path, mock_requests):
    cache = tmp_path / "cache" / "cards.json"
    repo = CardRepository()

    assert repo.load_from_url("https://example.invalid/cards.json", fallback_path=cache) is True
    assert len(repo) == 3
    assert json.loads(cache.read_text(encoding="utf-8")) == SAMPLE_PAYLOAD
    mock_requests.get.assert_called_once()


def test_load_from_url_falls_back_to_local_copy(tmp_path, mock_requests):
    cache = tmp_path / "cards.json"
    cache.write_text(json.dumps(SAMPLE_PAYLOAD[:1]), encoding="utf-8")
    mock_requests.get.side_effect = ConnectionError("offline")
    repo = CardRepository()

    assert repo.load_from_url("https://example.invalid/cards.json", fallback_path=cache) is True
    assert [card.id for card in repo.get_all()] == ["a1-001"]


def test_load_from_url_without_any_source(tmp_path, mock_requests):
    mock_requests.get.side_effect = ConnectionError("offline")
    repo = CardRepository()

    result = repo.load_from_url(
        "https://example.invalid/cards.json", fallback_path=tmp_path / "missing.json"
    )

    assert result is False
    assert repo.is_loaded() is False


# ============= Global Instance Tests =============


def test_get_card_repository_singleton():
    first = get_card_repository()

    assert get_card_repository() is first
    reset_card_repository()
    assert get_card_repository() is not first


def test_load_from_file_with_infinite_stat(tmp_path):
    """Test a non-finite stat degrades to 0 instead of failing the load."""
    path = tmp_path / "cards.json"
    path.write_text(
        '[{"id": "a", "name": "A", "cardType": "EX", "hp": Infinity, "maxDamage": 1e999}]',
        encoding="utf-8",
    )
    repo = CardRepository()

    assert repo.load_from_file(path) is True
    card = repo.get_by_key("a")
    assert (card.hp, card.max_damage) == (0, 0)
