from collections.abc import Collection, Iterable
from enum import Enum

from utils.filter_criteria import ComparisonKind

# Full-width katakana block that folds onto hiragana
_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6
_KANA_OFFSET = 0x60
_KATAKANA_TO_HIRAGANA = {
    code: code - _KANA_OFFSET for code in range(_KATAKANA_START, _KATAKANA_END + 1)
}


def normalize_search_text(text: str | None) -> str:
    """Fold katakana onto hiragana and case-fold so both scripts and cases match each other."""
    if not text:
        return ""
    return text.translate(_KATAKANA_TO_HIRAGANA).casefold()


def matches_text(query: str, name: str, effects: Iterable[str]) -> bool:
    """``query`` must already be normalized; an empty query matches everything."""
    if not query:
        return True
    if query in normalize_search_text(name):
        return True
    return any(query in normalize_search_text(effect) for effect in effects)


def matches_comparison(card_value: int, target: int, comparison: ComparisonKind) -> bool:
    if comparison is ComparisonKind.LESS_OR_EQUAL:
        return card_value <= target
    if comparison is ComparisonKind.EQUAL:
        return card_value == target
    if comparison is ComparisonKind.GREATER_OR_EQUAL:
        return card_value >= target
    return True


def matches_membership(value: Enum | None, selected: Collection[Enum]) -> bool:
    """An empty selection is disabled; a record without the attribute never matches an enabled one."""
    if not selected:
        return True
    if value is None:
        return False
    return value in selected


def matches_range(card_value: int, low: int, high: int, default_low: int, default_high: int) -> bool:
    """Range filter used by the form search; inactive while it spans the default bounds."""
    if low <= default_low and high >= default_high:
        return True
    return low <= card_value <= high
