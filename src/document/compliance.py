"""Structural platform limits and category-fit heuristics.

These checks look at the assembled wire document only. Limits breaches are fatal `ComplianceError`
findings; style issues and category suggestions are advisory `PolicyWarning` findings. The category
is never changed here: a suggestion only ever produces a warning.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import Any

from src.document.examples import body_example_row
from src.document.types import Document, ErrorKind, Finding, SectionType, warning
from src.template.normalize import count_placeholder_tokens, extract_placeholders
from src.template.schema import ButtonKind, Category, HeaderKind

NAME_RE = re.compile(r"^[a-z0-9_]+$")
NAME_MAX_LENGTH = 512
HEADER_TEXT_MAX_LENGTH = 60
HEADER_MAX_VARIABLES = 1
BODY_TEXT_MAX_LENGTH = 1024
FOOTER_TEXT_MAX_LENGTH = 60
BUTTON_TEXT_MAX_LENGTH = 25
MAX_BUTTONS = 10
MAX_URL_BUTTONS = 2
MAX_PHONE_BUTTONS = 1

OPT_OUT_PHRASES: tuple[str, ...] = ("stop", "unsubscribe", "opt out", "opt-out")
# Looser match used when guessing the category: any quick reply mentioning "opt" reads as marketing.
_OPT_OUT_MARKERS: tuple[str, ...] = OPT_OUT_PHRASES + ("opt",)

MARKETING_KEYWORDS: tuple[str, ...] = (
    "sale", "discount", "offer", "promo", "promotion", "deal", "save",
    "limited time", "exclusive", "special", "buy now", "shop now",
    "free", "gift", "reward", "loyalty", "points", "cashback",
    "new arrival", "launch", "introducing", "announcement",
    "newsletter", "subscribe", "unsubscribe", "opt-out", "opt out",
    "click here", "learn more", "sign up", "register now",
)

UTILITY_KEYWORDS: tuple[str, ...] = (
    "order", "confirmation", "receipt", "invoice", "payment",
    "shipping", "shipped", "delivery", "tracking", "status", "update",
    "appointment", "booking", "reservation", "reminder",
    "account", "ticket", "support", "transaction", "transfer", "balance", "statement",
)

AUTHENTICATION_KEYWORDS: tuple[str, ...] = (
    "otp", "verification code", "verify", "authenticate", "one-time", "one time",
    "2fa", "two-factor", "two factor", "passcode", "login code", "sign in",
)


def _error(message: str, location: str) -> Finding:
    return Finding(kind=ErrorKind.compliance_error, message=message, fatal=True, location=location)


def _count_keywords(text: str, keywords: Iterable[str]) -> int:
    return sum(len(re.findall(rf"\b{re.escape(k)}\b", text)) for k in keywords)


def _all_buttons(document: Document) -> list[dict[str, Any]]:
    buttons: list[dict[str, Any]] = []
    for section in document.sections(SectionType.buttons):
        buttons.extend(section.get("buttons") or [])
    for carousel in document.sections(SectionType.carousel):
        for card in carousel.get("cards") or []:
            for component in card.get("components") or []:
                if component.get("type") == SectionType.buttons:
                    buttons.extend(component.get("buttons") or [])
    return buttons


def _is_opt_out_button(button: dict[str, Any]) -> bool:
    text = (button.get("text") or "").lower()
    return button.get("type") == ButtonKind.quick_reply and any(m in text for m in _OPT_OUT_MARKERS)


def _document_text(document: Document) -> str:
    parts: list[str] = []
    for section in document.components:
        if section.get("text"):
            parts.append(section["text"])
    parts.extend(b.get("text") or "" for b in _all_buttons(document))
    return " ".join(parts).lower()


def check_name(document: Document) -> list[Finding]:
    findings: list[Finding] = []
    if not NAME_RE.fullmatch(document.name):
        findings.append(_error("template name must contain only a-z, 0-9 and _", "name"))
    if len(document.name) > NAME_MAX_LENGTH:
        findings.append(_error(f"template name exceeds {NAME_MAX_LENGTH} characters", "name"))
    return findings


def check_structure(document: Document) -> list[Finding]:
    """Exactly one BODY; HEADER and FOOTER at most once."""

    findings: list[Finding] = []
    counts = Counter(section.get("type") for section in document.components)
    if counts[SectionType.body.value] != 1:
        findings.append(_error("template must have exactly one BODY component", "components"))
    for section_type in (SectionType.header, SectionType.footer, SectionType.buttons):
        if counts[section_type.value] > 1:
            findings.append(_error(f"duplicate {section_type.value} component", "components"))
    return findings


def check_text_limits(document: Document) -> list[Finding]:
    findings: list[Finding] = []

    header = document.section(SectionType.header)
    if header is not None and header.get("format") == HeaderKind.text:
        text = header.get("text") or ""
        if len(text) > HEADER_TEXT_MAX_LENGTH:
            findings.append(_error(f"header text exceeds {HEADER_TEXT_MAX_LENGTH} characters", "header"))
        if count_placeholder_tokens(text) > HEADER_MAX_VARIABLES:
            findings.append(_error(f"header text can contain at most {HEADER_MAX_VARIABLES} variable", "header"))

    body = document.section(SectionType.body)
    if body is not None:
        text = body.get("text")
        if not (text or "").strip() and document.category != Category.authentication:
            findings.append(_error("body text is required", "body"))
        elif text is not None and len(text) > BODY_TEXT_MAX_LENGTH:
            findings.append(_error(f"body text exceeds {BODY_TEXT_MAX_LENGTH} characters", "body"))

    footer = document.section(SectionType.footer)
    if footer is not None and len(footer.get("text") or "") > FOOTER_TEXT_MAX_LENGTH:
        findings.append(_error(f"footer text exceeds {FOOTER_TEXT_MAX_LENGTH} characters", "footer"))

    return findings


def check_buttons(buttons: Sequence[dict[str, Any]], *, location: str = "buttons") -> list[Finding]:
    """Platform limits on one BUTTONS section."""

    findings: list[Finding] = []
    kinds = [b.get("type") for b in buttons]

    if len(buttons) > MAX_BUTTONS:
        findings.append(_error(f"at most {MAX_BUTTONS} buttons allowed", location))
    if kinds.count(ButtonKind.url.value) > MAX_URL_BUTTONS:
        findings.append(_error(f"at most {MAX_URL_BUTTONS} URL buttons allowed", location))
    if kinds.count(ButtonKind.phone_number.value) > MAX_PHONE_BUTTONS:
        findings.append(_error(f"at most {MAX_PHONE_BUTTONS} phone number button allowed", location))

    for index, button in enumerate(buttons):
        text = button.get("text") or ""
        if len(text) > BUTTON_TEXT_MAX_LENGTH:
            findings.append(
                _error(f"button text {text!r} exceeds {BUTTON_TEXT_MAX_LENGTH} characters", f"{location}[{index}]")
            )

    quick_reply_positions = [i for i, kind in enumerate(kinds) if kind == ButtonKind.quick_reply]
    if quick_reply_positions:
        first, last = quick_reply_positions[0], quick_reply_positions[-1]
        if len(quick_reply_positions) != last - first + 1:
            findings.append(warning("quick reply buttons should be grouped together", location=location))

    return findings


def _check_body_example(section: dict[str, Any], location: str) -> list[Finding]:
    row = body_example_row(section)
    if row is None:
        return [_error("body example must be a single-row nested list (body_text: [[...]])", location)]
    expected = len(extract_placeholders(section.get("text")))
    if len(row) != expected:
        return [_error(f"body declares {expected} placeholders but the example row has {len(row)} values", location)]
    return []


def check_examples(document: Document) -> list[Finding]:
    """Example payloads agree with the placeholders their text declares."""

    findings: list[Finding] = []
    for section in document.sections(SectionType.body):
        findings.extend(_check_body_example(section, "body"))

    header = document.section(SectionType.header)
    if header is not None and header.get("format") == HeaderKind.text:
        expected = len(extract_placeholders(header.get("text")))
        values = (header.get("example") or {}).get("header_text", [])
        flat = isinstance(values, list) and all(isinstance(v, str) for v in values)
        if expected and (not flat or len(values) != expected):
            findings.append(_error("header text example must be a flat list, one value per placeholder", "header"))

    for carousel in document.sections(SectionType.carousel):
        for index, card in enumerate(carousel.get("cards") or []):
            for component in card.get("components") or []:
                if component.get("type") == SectionType.body:
                    findings.extend(_check_body_example(component, f"cards[{index}].body"))
    return findings


def suggest_category(document: Document) -> Category:
    """Score the document text against category keyword lists (best effort)."""

    buttons = _all_buttons(document)
    if any(b.get("type") == ButtonKind.copy_code for b in buttons):
        return Category.authentication
    body = document.section(SectionType.body) or {}
    if body.get("add_security_recommendation"):
        return Category.authentication
    if any(_is_opt_out_button(b) for b in buttons):
        return Category.marketing

    text = _document_text(document)
    marketing = _count_keywords(text, MARKETING_KEYWORDS)
    utility = _count_keywords(text, UTILITY_KEYWORDS)
    authentication = _count_keywords(text, AUTHENTICATION_KEYWORDS)

    if authentication > marketing and authentication > utility:
        return Category.authentication
    if marketing > utility:
        return Category.marketing
    return Category.utility


def check_category_fit(document: Document) -> list[Finding]:
    """Warn when the declared category disagrees with the content in a way the platform re-categorizes."""

    suggested = suggest_category(document)
    declared = document.category
    if suggested == declared:
        return []

    if suggested == Category.authentication:
        message = "content carries authentication elements; the platform expects AUTHENTICATION"
    elif declared == Category.utility and suggested == Category.marketing:
        message = "content looks promotional; the platform may re-categorize it as MARKETING"
    elif declared == Category.marketing and suggested == Category.utility:
        message = "content looks transactional; it could be submitted as UTILITY"
    else:
        return []
    return [warning(message, location="category")]


def check_compliance(document: Document) -> list[Finding]:
    """Run every structural compliance check and return all findings."""

    findings: list[Finding] = []
    findings.extend(check_name(document))
    findings.extend(check_structure(document))
    findings.extend(check_text_limits(document))
    for section in document.sections(SectionType.buttons):
        findings.extend(check_buttons(section.get("buttons") or []))
    findings.extend(check_examples(document))
    findings.extend(check_category_fit(document))
    return findings
