"""Per-section wire fragment builders (header, body, footer, buttons).

Each builder returns a wire dict (or `None` when the section is omitted) and raises `BuildError` on
fatal input. Category-dependent behavior comes from the category policy table.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from src.document.examples import (
    build_body_example,
    build_header_media_example,
    build_header_text_example,
    build_url_example,
)
from src.document.media import is_valid_media_handle
from src.document.options import FOOTER_MAX_LENGTH, BuildOptions
from src.document.types import BuildError, ErrorKind, Finding, SectionType, warning
from src.template.categories import policy_for
from src.template.normalize import extract_placeholders, strip_emoji
from src.template.samples import resolve_samples, url_sample
from src.template.schema import (
    MEDIA_HEADER_KINDS,
    BodyIntent,
    ButtonKind,
    Category,
    CopyCodeButton,
    FlowAction,
    FlowButton,
    FooterIntent,
    HeaderIntent,
    HeaderKind,
    PhoneNumberButton,
    QuickReplyButton,
    UnsupportedButton,
    UrlButton,
)

logger = logging.getLogger(__name__)

BUTTON_TEXT_MAX_LENGTH = 25
FLOW_BUTTON_TEXT_MAX_LENGTH = 20

_DEFAULT_BUTTON_TEXT: dict[ButtonKind, str] = {
    ButtonKind.quick_reply: "Reply",
    ButtonKind.phone_number: "Call",
    ButtonKind.url: "Visit",
    ButtonKind.flow: "Open Flow",
}


def _button_text(text: str | None, kind: ButtonKind, max_length: int = BUTTON_TEXT_MAX_LENGTH) -> str:
    return (text or "").strip()[:max_length] or _DEFAULT_BUTTON_TEXT[kind]


def normalize_phone_number(value: str) -> str:
    """Normalize a phone number to E.164 by prefixing `+` when missing."""

    number = "".join(value.split())
    if number and not number.startswith("+"):
        number = "+" + number
    return number


def require_media_handle(handle: str | None, *, location: str, options: BuildOptions) -> str:
    """Return a usable media handle or raise `MissingMediaHandle` / `InvalidMediaHandle`."""

    value = (handle or "").strip()
    if not value:
        raise BuildError(ErrorKind.missing_media_handle, f"{location} requires an uploaded media handle")
    if not is_valid_media_handle(value, min_length=options.min_media_handle_length):
        raise BuildError(ErrorKind.invalid_media_handle, f"{location} media handle is not a real upload handle")
    return value


def build_header_section(
        header: HeaderIntent | None,
        *,
        category: Category,
        options: BuildOptions,
) -> dict[str, Any] | None:
    """Build the HEADER section; `None` when the header is omitted."""

    if header is None or header.kind == HeaderKind.none:
        return None

    if header.kind == HeaderKind.location:
        return {"type": SectionType.header.value, "format": HeaderKind.location.value}

    if header.kind in MEDIA_HEADER_KINDS:
        handle = require_media_handle(header.media_handle, location="header", options=options)
        return {
            "type": SectionType.header.value,
            "format": header.kind.value,
            "example": build_header_media_example(handle),
        }

    # TEXT
    text = header.text or ""
    if policy_for(category).strip_header_emoji:
        text = strip_emoji(text)
    if not text.strip():
        return None

    section: dict[str, Any] = {
        "type": SectionType.header.value,
        "format": HeaderKind.text.value,
        "text": text,
    }
    if extract_placeholders(text):
        samples = resolve_samples(
            text,
            header.placeholder_values,
            header.placeholder_labels,
            strategy=options.sample_strategy,
        )
        section["example"] = build_header_text_example(samples)
    return section


def build_body_section(
        body: BodyIntent,
        *,
        category: Category,
        options: BuildOptions,
) -> dict[str, Any]:
    """Build the BODY section. The example is always present and always double-nested."""

    text = body.text
    placeholders = extract_placeholders(text)
    policy = policy_for(category)

    section: dict[str, Any] = {"type": SectionType.body.value}
    if policy.withhold_body_text_with_placeholders and placeholders:
        # The platform renders authentication bodies from its fixed layout.
        section["example"] = build_body_example([])
    else:
        section["text"] = text
        samples = resolve_samples(
            text,
            body.placeholder_values,
            body.placeholder_labels,
            strategy=options.sample_strategy,
        )
        section["example"] = build_body_example(samples)

    if category == Category.authentication and body.add_security_recommendation is not None:
        section["add_security_recommendation"] = body.add_security_recommendation
    return section


def build_footer_section(
        footer: FooterIntent | None,
        *,
        category: Category,
        options: BuildOptions,
) -> dict[str, Any] | None:
    """Build the FOOTER section; `None` when omitted."""

    policy = policy_for(category)
    if not policy.allow_footer:
        return None

    text = (footer.text if footer is not None else "").strip()
    if text:
        return {"type": SectionType.footer.value, "text": text[:FOOTER_MAX_LENGTH]}
    if policy.synthesize_opt_out_footer:
        return {"type": SectionType.footer.value, "text": options.marketing_opt_out_footer[:FOOTER_MAX_LENGTH]}
    return None


def build_button(
        button: Any,
        *,
        options: BuildOptions,
        warnings: list[Finding],
        location: str = "buttons",
        allowed: Iterable[ButtonKind] | None = None,
) -> dict[str, Any] | None:
    """Build one wire button. Unknown (or disallowed) kinds are dropped with a warning."""

    allowed_kinds = set(allowed) if allowed is not None else None
    if isinstance(button, UnsupportedButton) or (
            allowed_kinds is not None and ButtonKind(button.type) not in allowed_kinds
    ):
        kind = button.original_type if isinstance(button, UnsupportedButton) else button.type
        logger.warning("dropped button kind=%s location=%s", kind, location)
        warnings.append(warning(f"dropped unsupported button kind {kind!r}", location=location))
        return None

    if isinstance(button, QuickReplyButton):
        return {"type": ButtonKind.quick_reply.value, "text": _button_text(button.text, ButtonKind.quick_reply)}

    if isinstance(button, PhoneNumberButton):
        number = normalize_phone_number(button.phone_number)
        if not number:
            raise BuildError(
                ErrorKind.missing_button_target, f"{location}: PHONE_NUMBER button requires a phone number"
            )
        return {
            "type": ButtonKind.phone_number.value,
            "text": _button_text(button.text, ButtonKind.phone_number),
            "phone_number": number,
        }

    if isinstance(button, UrlButton):
        if not button.url:
            raise BuildError(ErrorKind.missing_button_target, f"{location}: URL button requires a url")
        built: dict[str, Any] = {
            "type": ButtonKind.url.value,
            "text": _button_text(button.text, ButtonKind.url),
            "url": button.url,
        }
        if "{{1}}" in button.url:
            built["example"] = build_url_example(button.example or url_sample(button.url))
        return built

    if isinstance(button, FlowButton):
        if not button.flow_id:
            raise BuildError(ErrorKind.missing_flow_id, f"{location}: FLOW button requires a flow id")
        built = {
            "type": ButtonKind.flow.value,
            "text": _button_text(button.text, ButtonKind.flow, FLOW_BUTTON_TEXT_MAX_LENGTH),
            "flow_id": button.flow_id,
            "flow_action": button.flow_action.value,
        }
        if button.flow_action == FlowAction.navigate and button.navigate_screen:
            built["navigate_screen"] = button.navigate_screen
        return built

    if isinstance(button, CopyCodeButton):
        return build_copy_code_button(button.example, options=options)

    raise BuildError(ErrorKind.invalid_intent, f"{location}: unexpected button value {button!r}")


def build_copy_code_button(code: str | None, *, options: BuildOptions) -> dict[str, Any]:
    return {"type": ButtonKind.copy_code.value, "example": (code or "").strip() or options.default_otp_code}


def _collapse_to_copy_code(
        buttons: Sequence[Any],
        *,
        options: BuildOptions,
        warnings: list[Finding],
) -> dict[str, Any]:
    codes = [b.example for b in buttons if isinstance(b, CopyCodeButton) and b.example]
    if len(buttons) != 1 or not isinstance(buttons[0], CopyCodeButton):
        logger.info("authentication buttons collapsed supplied=%d", len(buttons))
        if buttons:
            warnings.append(
                warning(
                    "authentication templates carry exactly one COPY_CODE button; supplied buttons were replaced",
                    location="buttons",
                )
            )
    return build_copy_code_button(codes[0] if codes else None, options=options)


def build_buttons_section(
        buttons: Sequence[Any],
        *,
        category: Category,
        options: BuildOptions,
        warnings: list[Finding],
) -> dict[str, Any] | None:
    """Build the BUTTONS section; `None` when no button survives."""

    if policy_for(category).collapse_buttons_to_copy_code:
        return {
            "type": SectionType.buttons.value,
            "buttons": [_collapse_to_copy_code(buttons, options=options, warnings=warnings)],
        }

    built: list[dict[str, Any]] = []
    for index, button in enumerate(buttons):
        wire = build_button(button, options=options, warnings=warnings, location=f"buttons[{index}]")
        if wire is not None:
            built.append(wire)
    if not built:
        return None
    return {"type": SectionType.buttons.value, "buttons": built}
