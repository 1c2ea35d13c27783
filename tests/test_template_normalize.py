"""Tests for name normalization, emoji handling and placeholder extraction."""

from __future__ import annotations

import pytest

from src.template.normalize import (
    contains_emoji,
    count_placeholder_tokens,
    extract_placeholders,
    normalize_name,
    strip_emoji,
)


def test_normalize_name_basic() -> None:
    assert normalize_name("Summer Sale 2025!") == "summer_sale_2025"
    assert normalize_name("  __Order--Update__ ") == "order_update"
    assert normalize_name("Café déjà vu") == "caf_d_j_vu"


def test_normalize_name_truncates_without_trailing_underscore() -> None:
    assert normalize_name("abc def", max_length=4) == "abc"
    assert len(normalize_name("x" * 600)) == 512


@pytest.mark.parametrize(
    "raw",
    ["Summer Sale 2025!", "__a__b__", "Ünïcode Näme", "abc def", "ALL CAPS", "emoji 🎉 name"],
)
def test_normalize_name_is_idempotent(raw: str) -> None:
    once = normalize_name(raw, max_length=4)
    assert normalize_name(once, max_length=4) == once
    once = normalize_name(raw)
    assert normalize_name(once) == once


def test_emoji_detection_and_stripping_agree() -> None:
    for text in ("Verify ✅", "Sale 🎉 now", "Star ⭐", "Keycap 1️⃣"):
        assert contains_emoji(text)
        assert not contains_emoji(strip_emoji(text))


def test_strip_emoji_tidies_whitespace() -> None:
    assert strip_emoji("Verify ✅") == "Verify"
    assert strip_emoji("Big 🎉 sale") == "Big sale"


def test_plain_text_has_no_emoji() -> None:
    assert not contains_emoji("Your verification code")
    assert not contains_emoji("")
    assert not contains_emoji(None)


def test_extract_placeholders_is_distinct_and_numeric() -> None:
    assert extract_placeholders("{{10}} then {{2}} and {{1}} and {{2}}") == [1, 2, 10]
    assert extract_placeholders("no placeholders") == []
    assert extract_placeholders(None) == []


def test_count_placeholder_tokens_counts_repeats() -> None:
    assert count_placeholder_tokens("{{1}} {{1}} {{2}}") == 3


def test_strip_emoji_removes_orphaned_selectors_and_joiners() -> None:
    assert strip_emoji("Verify \u2764\ufe0f") == "Verify"
    assert strip_emoji("Family \U0001f468\u200d\U0001f469\u200d\U0001f467 code") == "Family code"
    assert not contains_emoji(strip_emoji("Keycap 1\ufe0f\u20e3 done"))
