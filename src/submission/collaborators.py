"""External collaborator contracts.

The engine never talks to the network. Media upload and template submission are provided by the
caller as objects implementing these protocols (e.g. a Graph API client).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Protocol

from src.document.types import Document
from src.template.schema import HeaderKind


@dataclass(frozen=True)
class UploadContext:
    """Who uploads what. The organization id is opaque to the engine."""

    organization_id: str
    media_kind: HeaderKind
    filename: str | None = None


class MediaUploader(Protocol):
    """Uploads a media file and returns the platform's opaque handle."""

    async def upload(self, file: BinaryIO | bytes, context: UploadContext) -> str:
        ...


class TemplateTransport(Protocol):
    """Submits a finished document to the messaging platform."""

    async def submit(self, document: Document) -> Any:
        ...
