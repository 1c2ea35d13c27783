"""Tests for the carousel document variant."""

from __future__ import annotations

import pytest

from src.document.builder import build_document
from src.document.types import BuildError, ErrorKind, SectionType
from src.template.schema import Category, intent_from_obj


def _card(index: int, buttons: list[dict[str, str]] | None = None) -> dict[str, object]:
    return {
        "header_media": {"kind": "image", "handle": f"4::card{index}handle"},
        "body": {"text": f"Offer {index}: {{{{1}}}} off", "placeholder_values": {"1": "10%"}},
        "buttons": buttons if buttons is not None else [{"type": "QUICK_REPLY", "text": "Buy"}],
    }


def _carousel(cards: list[dict[str, object]], category: str = "MARKETING"):
    return intent_from_obj(
        {
            "name": "Spring Collection",
            "category": category,
            "body": {"text": "Check out our spring picks, {{1}}!", "placeholder_values": {"1": "Ana"}},
            "carousel": {"cards": cards},
        }
    )


@pytest.mark.parametrize("count", [0, 1, 11])
def test_card_count_out_of_range_fails(count: int) -> None:
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(i) for i in range(count)]))
    assert exc.value.kind == ErrorKind.invalid_card_count


def test_card_count_is_checked_before_cards() -> None:
    # The single card is also broken; the count error must win.
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(0, buttons=[])]))
    assert exc.value.kind == ErrorKind.invalid_card_count


def test_card_without_buttons_fails() -> None:
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(0), _card(1, buttons=[])]))
    assert exc.value.kind == ErrorKind.card_missing_button
    assert "cards[1]" in exc.value.reason


def test_card_with_only_disallowed_buttons_fails() -> None:
    buttons = [{"type": "FLOW", "flow_id": "1"}]
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(0), _card(1, buttons=buttons)]))
    assert exc.value.kind == ErrorKind.card_missing_button


def test_card_with_too_many_buttons_fails() -> None:
    buttons = [{"type": "QUICK_REPLY", "text": t} for t in ("A", "B", "C")]
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(0), _card(1, buttons=buttons)]))
    assert exc.value.kind == ErrorKind.invalid_card_button_count


def test_card_without_media_handle_fails() -> None:
    card = _card(1)
    card["header_media"] = {"kind": "VIDEO"}
    with pytest.raises(BuildError) as exc:
        build_document(_carousel([_card(0), card]))
    assert exc.value.kind == ErrorKind.missing_media_handle


def test_carousel_document_structure() -> None:
    result = build_document(_carousel([_card(0), _card(1)]))
    document = result.document

    assert document.category == Category.marketing
    assert [c["type"] for c in document.components] == ["BODY", "CAROUSEL"]
    assert document.section(SectionType.body) == {
        "type": "BODY",
        "text": "Check out our spring picks, {{1}}!",
        "example": {"body_text": [["Ana"]]},
    }

    carousel = document.section(SectionType.carousel)
    assert carousel is not None
    assert len(carousel["cards"]) == 2
    assert carousel["cards"][0] == {
        "components": [
            {"type": "HEADER", "format": "IMAGE", "example": {"header_handle": ["4::card0handle"]}},
            {"type": "BODY", "text": "Offer 0: {{1}} off", "example": {"body_text": [["10%"]]}},
            {"type": "BUTTONS", "buttons": [{"type": "QUICK_REPLY", "text": "Buy"}]},
        ]
    }
    assert result.warnings == ()


def test_carousel_category_is_coerced_to_marketing() -> None:
    result = build_document(_carousel([_card(0), _card(1)], category="UTILITY"))
    assert result.document.category == Category.marketing
    assert [w.location for w in result.warnings] == ["category"]


def test_dropped_card_button_is_reported() -> None:
    buttons = [{"type": "QUICK_REPLY", "text": "Buy"}, {"type": "COPY_CODE", "example": "X1"}]
    result = build_document(_carousel([_card(0), _card(1, buttons=buttons)]))
    assert [w.location for w in result.warnings] == ["cards[1].buttons[1]"]
