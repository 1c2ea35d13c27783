"""Submission pipeline: build -> validate -> submit.

The transport collaborator is only invoked when the validator reports no fatal findings. Build
errors propagate unchanged; fatal findings raise `DocumentValidationError` with the full report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import monotonic
from typing import Any, BinaryIO

from src.document.builder import build_document
from src.document.media import is_valid_media_handle
from src.document.options import BuildOptions
from src.document.types import (
    BuildError,
    Document,
    DocumentValidationError,
    ErrorKind,
    Finding,
)
from src.document.validator import validate_document
from src.submission.collaborators import MediaUploader, TemplateTransport, UploadContext
from src.template.schema import Intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    """Transport result plus the submitted document and its advisory warnings."""

    result: Any
    document: Document
    warnings: tuple[Finding, ...]


async def upload_media(
        uploader: MediaUploader,
        file: BinaryIO | bytes,
        context: UploadContext,
        *,
        options: BuildOptions | None = None,
) -> str:
    """Upload media through the collaborator and re-validate the returned handle.

    Raises:
        BuildError: `InvalidMediaHandle` if the collaborator returned a placeholder or malformed handle.
    """

    opts = options or BuildOptions()
    handle = await uploader.upload(file, context)
    if not is_valid_media_handle(handle, min_length=opts.min_media_handle_length):
        logger.info("upload rejected org=%s kind=%s", context.organization_id, context.media_kind)
        raise BuildError(ErrorKind.invalid_media_handle, "upload returned an unusable media handle")
    return handle


async def submit_template(
        intent: Intent,
        *,
        transport: TemplateTransport,
        options: BuildOptions | None = None,
) -> SubmissionOutcome:
    """Build, validate and submit one template.

    Raises:
        BuildError: If the intent cannot be compiled.
        DocumentValidationError: If the document has fatal findings (the transport is not called).
    """

    started = monotonic()

    built = build_document(intent, options=options)
    report = validate_document(built.document, intent, options=options)

    if not report.ok:
        logger.info(
            "rejected name=%s errors=%s",
            built.document.name,
            ",".join(str(f.kind) for f in report.errors),
        )
        raise DocumentValidationError(report)

    result = await transport.submit(built.document)

    warnings = built.warnings + report.warnings
    latency_ms = int((monotonic() - started) * 1000)
    logger.info(
        "submitted name=%s category=%s warnings=%d latency_ms=%d",
        built.document.name,
        built.document.category,
        len(warnings),
        latency_ms,
    )
    return SubmissionOutcome(result=result, document=built.document, warnings=warnings)
