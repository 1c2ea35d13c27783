"""Pre-submission validator.

The validator rejects documents that were structurally buildable but still violate platform policy.
It never mutates the document and never short-circuits: every check runs and all findings are
returned at once, so the caller sees every problem in a single pass.
"""

from __future__ import annotations

from typing import Any

from src.document.builder import build_document
from src.document.carousel import MAX_CARD_BUTTONS, MAX_CARDS, MIN_CARDS
from src.document.compliance import OPT_OUT_PHRASES, check_buttons, check_compliance
from src.document.examples import header_media_handle
from src.document.media import is_valid_media_handle
from src.document.options import BuildOptions
from src.document.types import (
    BuildError,
    BuildResult,
    Document,
    ErrorKind,
    Finding,
    SectionType,
    ValidationReport,
    warning,
)
from src.template.categories import policy_for
from src.template.normalize import contains_emoji
from src.template.schema import MEDIA_HEADER_KINDS, ButtonKind, HeaderKind, Intent


def _fatal(kind: ErrorKind, message: str, location: str) -> Finding:
    return Finding(kind=kind, message=message, fatal=True, location=location)


def _check_media_header(section: dict[str, Any], location: str, options: BuildOptions) -> list[Finding]:
    if section.get("format") not in MEDIA_HEADER_KINDS:
        return []
    handle = header_media_handle(section)
    if handle is None or not is_valid_media_handle(handle, min_length=options.min_media_handle_length):
        return [_fatal(ErrorKind.invalid_media_handle, "media header handle is missing or a placeholder", location)]
    return []


def _cards(document: Document) -> list[dict[str, Any]]:
    cards: list[dict[str, Any]] = []
    for carousel in document.sections(SectionType.carousel):
        cards.extend(carousel.get("cards") or [])
    return cards


def _card_component(card: dict[str, Any], section_type: SectionType) -> dict[str, Any] | None:
    for component in card.get("components") or []:
        if component.get("type") == section_type:
            return component
    return None


def check_media_handles(document: Document, *, options: BuildOptions) -> list[Finding]:
    """Every media header (top-level and per card) carries a real upload handle."""

    findings: list[Finding] = []
    header = document.section(SectionType.header)
    if header is not None:
        findings.extend(_check_media_header(header, "header", options))
    for index, card in enumerate(_cards(document)):
        card_header = _card_component(card, SectionType.header)
        if card_header is None:
            findings.append(
                _fatal(ErrorKind.missing_media_handle, "card has no media header", f"cards[{index}].header")
            )
            continue
        findings.extend(_check_media_header(card_header, f"cards[{index}].header", options))
    return findings


def check_carousel(document: Document) -> list[Finding]:
    """Card count, per-card buttons and structural uniformity across cards."""

    if not document.sections(SectionType.carousel):
        return []

    findings: list[Finding] = []
    cards = _cards(document)
    if not MIN_CARDS <= len(cards) <= MAX_CARDS:
        findings.append(
            _fatal(ErrorKind.invalid_card_count, f"carousel requires {MIN_CARDS}-{MAX_CARDS} cards", "carousel")
        )

    shapes: list[tuple[Any, bool, int]] = []
    for index, card in enumerate(cards):
        location = f"cards[{index}]"
        buttons_section = _card_component(card, SectionType.buttons)
        buttons = (buttons_section or {}).get("buttons") or []
        if not buttons:
            findings.append(_fatal(ErrorKind.card_missing_button, "card must carry at least one button", location))
        elif len(buttons) > MAX_CARD_BUTTONS:
            findings.append(
                _fatal(ErrorKind.invalid_card_button_count, f"card carries more than {MAX_CARD_BUTTONS} buttons", location)
            )
        findings.extend(check_buttons(buttons, location=f"{location}.buttons"))

        header = _card_component(card, SectionType.header) or {}
        shapes.append((header.get("format"), _card_component(card, SectionType.body) is not None, len(buttons)))

    if shapes:
        first_format, first_has_body, first_buttons = shapes[0]
        for index, (media_format, has_body, button_count) in enumerate(shapes[1:], start=1):
            location = f"cards[{index}]"
            if media_format != first_format:
                findings.append(
                    _fatal(
                        ErrorKind.policy_violation,
                        f"all cards must use the same media format ({first_format})",
                        location,
                    )
                )
            if has_body != first_has_body:
                findings.append(
                    _fatal(ErrorKind.policy_violation, "all cards must have the same structure (body text)", location)
                )
            if button_count != first_buttons:
                findings.append(
                    _fatal(
                        ErrorKind.policy_violation,
                        f"all cards must have the same number of buttons ({first_buttons})",
                        location,
                    )
                )
    return findings


def _has_opt_out_button(document: Document) -> bool:
    buttons: list[dict[str, Any]] = []
    for section in document.sections(SectionType.buttons):
        buttons.extend(section.get("buttons") or [])
    for card in _cards(document):
        buttons.extend((_card_component(card, SectionType.buttons) or {}).get("buttons") or [])
    return any(
        b.get("type") == ButtonKind.quick_reply
        and any(phrase in (b.get("text") or "").lower() for phrase in OPT_OUT_PHRASES)
        for b in buttons
    )


def _header_texts(document: Document, intent: Intent | None) -> list[str]:
    texts: list[str] = []
    if intent is not None and intent.header is not None and intent.header.kind == HeaderKind.text:
        texts.append(intent.header.text or "")
    header = document.section(SectionType.header)
    if header is not None and header.get("format") == HeaderKind.text:
        texts.append(header.get("text") or "")
    return texts


def check_category_policy(document: Document, intent: Intent | None = None) -> list[Finding]:
    """Category rules from the policy table (emoji, opt-out, TTL)."""

    findings: list[Finding] = []
    policy = policy_for(document.category)

    if policy.forbid_header_emoji and any(contains_emoji(t) for t in _header_texts(document, intent)):
        findings.append(
            _fatal(
                ErrorKind.policy_violation,
                "authentication templates cannot contain emojis in header text",
                "header",
            )
        )

    if policy.warn_without_opt_out_button and not _has_opt_out_button(document):
        findings.append(
            warning(
                "marketing templates should include an opt-out quick reply button (e.g. 'Stop promotions')",
                location="buttons",
            )
        )

    ttl = document.message_send_ttl_seconds
    low, high = policy.ttl_range
    if ttl is not None and not low <= ttl <= high:
        findings.append(
            warning(
                f"{document.category} templates should use a TTL between {low} and {high} seconds",
                location="message_send_ttl_seconds",
            )
        )
    return findings


def validate_document(
        document: Document,
        intent: Intent | None = None,
        *,
        options: BuildOptions | None = None,
) -> ValidationReport:
    """Run every check against a built document and return all findings."""

    opts = options or BuildOptions()
    findings: list[Finding] = []
    findings.extend(check_media_handles(document, options=opts))
    findings.extend(check_carousel(document))
    findings.extend(check_category_policy(document, intent))
    findings.extend(check_compliance(document))
    return ValidationReport(findings=tuple(findings))


def check_intent(
        intent: Intent,
        *,
        options: BuildOptions | None = None,
) -> tuple[BuildResult | None, ValidationReport]:
    """Build and validate in one call, reporting a build failure as a single fatal finding.

    The report includes the builder's advisory warnings followed by the validator's findings.
    """

    try:
        result = build_document(intent, options=options)
    except BuildError as exc:
        return None, ValidationReport(findings=(_fatal(exc.kind, exc.reason, "build"),))

    report = validate_document(result.document, intent, options=options)
    return result, ValidationReport(findings=result.warnings + report.findings)
