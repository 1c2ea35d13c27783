"""Deterministic document builder.

The builder compiles a validated `Intent` into a wire `Document`: a pure function with no I/O. Any
fatal problem raises `BuildError` immediately and no partial document is returned. Advisory
observations (dropped buttons, category overrides) are returned alongside the document.
"""

from __future__ import annotations

from typing import Any

from src.document.carousel import build_carousel_components
from src.document.options import BuildOptions
from src.document.sections import (
    build_body_section,
    build_buttons_section,
    build_footer_section,
    build_header_section,
)
from src.document.types import BuildResult, Document, Finding
from src.template.normalize import normalize_name
from src.template.schema import Category, Intent


def _build_plain_components(
        intent: Intent,
        *,
        options: BuildOptions,
        warnings: list[Finding],
) -> list[dict[str, Any]]:
    category = intent.category
    components: list[dict[str, Any]] = []

    header = build_header_section(intent.header, category=category, options=options)
    if header is not None:
        components.append(header)

    components.append(build_body_section(intent.body, category=category, options=options))

    footer = build_footer_section(intent.footer, category=category, options=options)
    if footer is not None:
        components.append(footer)

    buttons = build_buttons_section(intent.buttons, category=category, options=options, warnings=warnings)
    if buttons is not None:
        components.append(buttons)

    return components


def build_document(intent: Intent, *, options: BuildOptions | None = None) -> BuildResult:
    """Build a wire Document from a validated Intent.

    Raises:
        BuildError: If the intent cannot produce a platform-compliant document.
    """

    opts = options or BuildOptions()
    warnings: list[Finding] = []

    if intent.is_carousel:
        category = Category.marketing
        components = build_carousel_components(intent, options=opts, warnings=warnings)
    else:
        category = intent.category
        components = _build_plain_components(intent, options=opts, warnings=warnings)

    document = Document(
        name=normalize_name(intent.name, max_length=opts.name_max_length),
        language=intent.language or opts.default_language,
        category=category,
        components=tuple(components),
        message_send_ttl_seconds=intent.message_send_ttl_seconds,
    )
    return BuildResult(document=document, warnings=tuple(warnings))
