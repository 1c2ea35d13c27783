"""Sample-value heuristics for placeholder examples.

The platform reviews every template with concrete example values. When the caller does not supply
one, a plausible value is inferred from a key: the caller's label for the placeholder, or else the
words right before the `{{n}}` token in the text ("your order {{2}}" -> "order").

These are best-effort defaults. Caller-supplied values always win, and the strategy is pluggable.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

from src.template.normalize import extract_placeholders

SampleStrategy = Callable[[str, int], str]

# Ordered: the first entry whose keyword appears among the key's tokens wins.
SAMPLE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("company", "business", "brand", "store", "shop", "organization"), "Acme Corp"),
    (("code", "otp", "pin", "passcode", "verification"), "123456"),
    (("order", "booking", "reservation", "invoice", "reference", "ref"), "#12345"),
    (("tracking", "track", "shipment", "parcel"), "TRK123456"),
    (("amount", "price", "total", "cost", "balance", "payment"), "$99.99"),
    (("discount", "percent", "percentage"), "25%"),
    (("date", "day", "deadline", "expiry"), "January 15, 2024"),
    (("time", "hour"), "10:30 AM"),
    (("minutes", "duration"), "10 minutes"),
    (("product", "item", "plan"), "Product Name"),
    (("city", "address", "location"), "New York"),
    (("name", "customer", "user", "client", "hi", "hello", "hey", "dear"), "John Doe"),
)

URL_SAMPLE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("track", "tracking", "shipment"), "TRK123456"),
    (("order", "orders", "booking", "invoice"), "12345"),
    (("product", "products", "item", "items", "p"), "product-123"),
    (("user", "users", "profile", "account"), "user123"),
    (("coupon", "promo", "offer", "deal"), "SAVE25"),
)

DEFAULT_URL_SAMPLE = "abc123"

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9]+")
_WORD_RE = re.compile(r"[^\W\d_]+|\d+")
_CONTEXT_WORDS = 2


def _tokens(value: str) -> set[str]:
    return {t for t in _TOKEN_SPLIT_RE.split((value or "").lower()) if t}


def _match_keywords(
        key: str,
        table: tuple[tuple[tuple[str, ...], str], ...],
) -> str | None:
    tokens = _tokens(key)
    for keywords, sample in table:
        if any(k in tokens for k in keywords):
            return sample
    return None


def default_sample(key: str, index: int) -> str:
    """Infer a sample value from a placeholder key; fall back to a generic `SampleN`."""

    return _match_keywords(key, SAMPLE_KEYWORDS) or f"Sample{index}"


def placeholder_context(text: str, index: int, *, words: int = _CONTEXT_WORDS) -> str:
    """Return up to `words` words immediately preceding the first `{{index}}` token in text."""

    token = "{{" + str(index) + "}}"
    position = (text or "").find(token)
    if position < 0:
        return ""
    preceding = _WORD_RE.findall(text[:position])
    return " ".join(preceding[-words:])


def resolve_samples(
        text: str,
        values: Mapping[str, str] | None = None,
        labels: Mapping[str, str] | None = None,
        *,
        strategy: SampleStrategy = default_sample,
) -> list[str]:
    """Resolve one sample value per distinct placeholder in text, ordered by placeholder index.

    Precedence per placeholder `n`:
        1) a non-blank caller value `values[str(n)]`;
        2) `strategy(labels[str(n)], n)` when the caller labelled the placeholder;
        3) `strategy(<words before the token>, n)`.
    """

    values = values or {}
    labels = labels or {}

    samples: list[str] = []
    for n in extract_placeholders(text):
        explicit = (values.get(str(n)) or "").strip()
        if explicit:
            samples.append(explicit)
            continue
        key = (labels.get(str(n)) or "").strip() or placeholder_context(text, n)
        samples.append(strategy(key, n))
    return samples


def url_sample(url: str) -> str:
    """Infer a sample for a URL's `{{1}}` suffix from the URL's path keywords."""

    path = (url or "").split("{{", 1)[0]
    path = path.split("://", 1)[-1]
    path = path.split("/", 1)[1] if "/" in path else ""
    return _match_keywords(path, URL_SAMPLE_KEYWORDS) or DEFAULT_URL_SAMPLE
