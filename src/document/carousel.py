"""Carousel document variant.

A carousel intent compiles into a top-level BODY (the message shown above the cards) followed by a
CAROUSEL section whose cards each carry their own nested component list. Carousel documents are
always MARKETING.
"""

from __future__ import annotations

import logging
from typing import Any

from src.document.examples import build_header_media_example
from src.document.options import BuildOptions
from src.document.sections import build_body_section, build_button, require_media_handle
from src.document.types import BuildError, ErrorKind, Finding, SectionType, warning
from src.template.schema import ButtonKind, CardIntent, Category, Intent

logger = logging.getLogger(__name__)

MIN_CARDS = 2
MAX_CARDS = 10
MAX_CARD_BUTTONS = 2

CARD_BUTTON_KINDS: frozenset[ButtonKind] = frozenset(
    {ButtonKind.quick_reply, ButtonKind.url, ButtonKind.phone_number}
)


def _build_card(
        card: CardIntent,
        index: int,
        *,
        options: BuildOptions,
        warnings: list[Finding],
) -> dict[str, Any]:
    location = f"cards[{index}]"
    handle = require_media_handle(card.header_media.handle, location=location, options=options)

    components: list[dict[str, Any]] = [
        {
            "type": SectionType.header.value,
            "format": card.header_media.kind.value,
            "example": build_header_media_example(handle),
        }
    ]

    if card.body is not None and card.body.text.strip():
        components.append(build_body_section(card.body, category=Category.marketing, options=options))

    buttons: list[dict[str, Any]] = []
    for button_index, button in enumerate(card.buttons):
        wire = build_button(
            button,
            options=options,
            warnings=warnings,
            location=f"{location}.buttons[{button_index}]",
            allowed=CARD_BUTTON_KINDS,
        )
        if wire is not None:
            buttons.append(wire)

    if not buttons:
        raise BuildError(ErrorKind.card_missing_button, f"{location} must carry at least one button")
    if len(buttons) > MAX_CARD_BUTTONS:
        raise BuildError(
            ErrorKind.invalid_card_button_count,
            f"{location} carries {len(buttons)} buttons (max {MAX_CARD_BUTTONS})",
        )

    components.append({"type": SectionType.buttons.value, "buttons": buttons})
    return {"components": components}


def build_carousel_components(
        intent: Intent,
        *,
        options: BuildOptions,
        warnings: list[Finding],
) -> list[dict[str, Any]]:
    """Build `[BODY, CAROUSEL]` for a carousel intent.

    The card count is checked before any card is processed.
    """

    if intent.carousel is None:
        raise BuildError(ErrorKind.invalid_intent, "intent has no carousel")

    cards = intent.carousel.cards
    if not MIN_CARDS <= len(cards) <= MAX_CARDS:
        raise BuildError(
            ErrorKind.invalid_card_count,
            f"carousel requires {MIN_CARDS}-{MAX_CARDS} cards, got {len(cards)}",
        )

    if intent.category != Category.marketing:
        logger.info("carousel category coerced requested=%s", intent.category)
        warnings.append(
            warning(f"carousel templates are always MARKETING (requested {intent.category})", location="category")
        )

    body = build_body_section(intent.body, category=Category.marketing, options=options)
    carousel = {
        "type": SectionType.carousel.value,
        "cards": [
            _build_card(card, index, options=options, warnings=warnings)
            for index, card in enumerate(cards)
        ],
    }
    return [body, carousel]
