"""Text normalization for schema-sensitive template logic.

All helpers here are pure and deterministic: the same input always yields the same output.
"""

from __future__ import annotations

import re

DEFAULT_NAME_MAX_LENGTH = 512

_NAME_INVALID_RE = re.compile(r"[^a-z0-9_]")
_NAME_UNDERSCORES_RE = re.compile(r"_{2,}")
PLACEHOLDER_RE = re.compile(r"\{\{(\d+)\}\}")

# Fixed code-point ranges treated as emoji. Shared by stripping and detection so both agree.
# Newer emoji blocks outside these ranges are not covered.
_EMOJI_RE = re.compile(
    "(?:"
    "[\u0023-\u0039]\ufe0f?\u20e3"
    "|[\U00010000-\U0010ffff]"
    "|[\u2700-\u27bf]"
    "|[\u2600-\u26ff]"
    "|[\u2190-\u21ff]"
    "|[\u23e9-\u23f3]"
    "|[\u23f8-\u23fa]"
    "|[\u25aa-\u25ab]"
    "|[\u25fb-\u25fe]"
    "|[\u2b05-\u2b07]"
    "|[\u00a9\u00ae\u203c\u2049\u2122\u2139\u231a\u231b\u2328\u23cf\u24c2\u25b6\u25c0"
    "\u2934\u2935\u2b1b\u2b1c\u2b50\u2b55\u3030\u303d\u3297\u3299]"
    ")"
)
# Variation selectors and joiners orphaned once their base emoji is removed.
_EMOJI_JOINERS_RE = re.compile("[\u200d\ufe0f]")
_MULTISPACE_RE = re.compile(r"[ \t]{2,}")


def normalize_name(name: str, *, max_length: int = DEFAULT_NAME_MAX_LENGTH) -> str:
    """Normalize a human label into a wire template identifier.

    Steps:
        - Lowercase.
        - Replace any character outside `[a-z0-9_]` with `_`.
        - Collapse repeated `_`.
        - Trim leading/trailing `_`.
        - Truncate to `max_length` (and re-trim, so the result stays idempotent).
    """

    value = (name or "").lower()
    value = _NAME_INVALID_RE.sub("_", value)
    value = _NAME_UNDERSCORES_RE.sub("_", value)
    value = value.strip("_")
    return value[:max_length].rstrip("_")


def contains_emoji(text: str | None) -> bool:
    """Whether the text contains any character in the emoji ranges."""

    return bool(text) and _EMOJI_RE.search(text) is not None


def strip_emoji(text: str) -> str:
    """Remove emoji characters and tidy the whitespace they leave behind."""

    value = _EMOJI_RE.sub("", text or "")
    value = _EMOJI_JOINERS_RE.sub("", value)
    value = _MULTISPACE_RE.sub(" ", value)
    return value.strip()


def extract_placeholders(text: str | None) -> list[int]:
    """Return the distinct `{{n}}` placeholder indexes referenced in text, sorted numerically."""

    return sorted({int(match) for match in PLACEHOLDER_RE.findall(text or "")})


def count_placeholder_tokens(text: str | None) -> int:
    """Count placeholder tokens including repeats (`{{1}} {{1}}` counts twice)."""

    return len(PLACEHOLDER_RE.findall(text or ""))
