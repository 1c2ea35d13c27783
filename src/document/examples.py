"""`example` payload shapes.

The nesting depth of each example is a function of the section type only, never of whether
placeholders are present:

    body           {"body_text": [[v1, v2, ...]]}   one row, even when empty: [[]]
    header text    {"header_text": [v1, ...]}      flat
    header media   {"header_handle": [handle]}     single-element list, never a bare string
    URL button     [v1]                            single-element list
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def build_body_example(values: Sequence[str]) -> dict[str, Any]:
    return {"body_text": [list(values)]}


def build_header_text_example(values: Sequence[str]) -> dict[str, Any]:
    return {"header_text": list(values)}


def build_header_media_example(handle: str) -> dict[str, Any]:
    return {"header_handle": [handle]}


def build_url_example(value: str) -> list[str]:
    return [value]


def body_example_row(section: dict[str, Any]) -> list[Any] | None:
    """Return the single example row of a BODY section, or `None` if the shape is wrong."""

    example = section.get("example")
    if not isinstance(example, dict):
        return None
    rows = example.get("body_text")
    if not isinstance(rows, list) or len(rows) != 1 or not isinstance(rows[0], list):
        return None
    return rows[0]


def header_media_handle(section: dict[str, Any]) -> str | None:
    """Return the handle of a media HEADER section, or `None` if the shape is wrong."""

    example = section.get("example")
    if not isinstance(example, dict):
        return None
    handles = example.get("header_handle")
    if not isinstance(handles, list) or len(handles) != 1 or not isinstance(handles[0], str):
        return None
    return handles[0]
