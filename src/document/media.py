"""Media handle validation.

Handles are opaque references returned by the external upload step. The upload collaborator is
trusted to validate file type/size, but the handle itself is re-checked before use so that
placeholder strings copied from sample templates never reach the platform.
"""

from __future__ import annotations

import re

DEFAULT_MIN_HANDLE_LENGTH = 5

_HANDLE_RE = re.compile(r"^[A-Za-z0-9:_\-+/=]+$")

# Markers of placeholder handles (matched case-insensitively).
PLACEHOLDER_HANDLE_MARKERS: tuple[str, ...] = (
    "dynamic_handle_from_upload",
    "sample",
    "example",
    "...",
    "…",
)


def is_placeholder_handle(handle: str) -> bool:
    lowered = handle.lower()
    return any(marker in lowered for marker in PLACEHOLDER_HANDLE_MARKERS)


def is_valid_media_handle(handle: str | None, *, min_length: int = DEFAULT_MIN_HANDLE_LENGTH) -> bool:
    """Whether a media handle looks like a real upload result.

    Rejects empty handles, known placeholder strings, handles shorter than `min_length` and handles
    with characters outside `[A-Za-z0-9:_-+/=]`.
    """

    if not handle or not isinstance(handle, str):
        return False
    if is_placeholder_handle(handle):
        return False
    if len(handle) < min_length:
        return False
    return _HANDLE_RE.fullmatch(handle) is not None
