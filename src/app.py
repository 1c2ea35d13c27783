"""Application composition root.

This module wires together configuration and the external collaborators for a submission runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from src.config.settings import Settings
from src.document.options import BuildOptions
from src.submission.collaborators import MediaUploader, TemplateTransport, UploadContext
from src.submission.service import SubmissionOutcome, submit_template, upload_media
from src.template.schema import Intent


@dataclass(frozen=True)
class App:
    """Shared dependencies for template submission."""

    settings: Settings
    transport: TemplateTransport
    uploader: MediaUploader | None = None

    @property
    def options(self) -> BuildOptions:
        return self.settings.build_options()

    async def submit(self, intent: Intent) -> SubmissionOutcome:
        """Submit an intent with the configured options and transport."""

        return await submit_template(intent, transport=self.transport, options=self.options)

    async def upload(self, file: BinaryIO | bytes, context: UploadContext) -> str:
        """Upload media through the configured uploader and return a validated handle.

        Raises:
            RuntimeError: If the app was created without an uploader.
        """

        if self.uploader is None:
            raise RuntimeError("no media uploader configured")
        return await upload_media(self.uploader, file, context, options=self.options)


def create_app(
        settings: Settings,
        *,
        transport: TemplateTransport,
        uploader: MediaUploader | None = None,
) -> App:
    """Create the application container."""

    return App(settings=settings, transport=transport, uploader=uploader)
