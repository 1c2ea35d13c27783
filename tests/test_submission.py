"""Tests for the async submission pipeline (build -> validate -> submit) and media upload."""

from __future__ import annotations

from typing import Any, BinaryIO

import pytest

from src.app import create_app
from src.config.settings import Settings
from src.document.types import BuildError, Document, DocumentValidationError, ErrorKind
from src.submission.collaborators import UploadContext
from src.submission.service import submit_template, upload_media
from src.template.schema import HeaderKind, intent_from_obj


class _FakeTransport:
    def __init__(self) -> None:
        self.submitted: list[Document] = []

    async def submit(self, document: Document) -> dict[str, Any]:
        """Record the submitted document (Graph API client substitute)."""
        self.submitted.append(document)
        return {"id": "1234567890", "status": "PENDING"}


class _FakeUploader:
    def __init__(self, handle: str) -> None:
        self.handle = handle
        self.calls: list[UploadContext] = []

    async def upload(self, file: BinaryIO | bytes, context: UploadContext) -> str:
        self.calls.append(context)
        return self.handle


def _intent(**overrides: object):
    base: dict[str, object] = {
        "name": "Order Update",
        "category": "UTILITY",
        "body": {"text": "Your order {{1}} shipped"},
    }
    base.update(overrides)
    return intent_from_obj(base)


@pytest.mark.asyncio
async def test_valid_template_is_submitted() -> None:
    transport = _FakeTransport()

    outcome = await submit_template(_intent(), transport=transport)

    assert outcome.result == {"id": "1234567890", "status": "PENDING"}
    assert transport.submitted == [outcome.document]
    assert outcome.document.name == "order_update"
    assert outcome.warnings == ()


@pytest.mark.asyncio
async def test_fatal_findings_block_the_transport() -> None:
    transport = _FakeTransport()
    intent = _intent(category="AUTHENTICATION", header={"kind": "TEXT", "text": "Verify ✅"})

    with pytest.raises(DocumentValidationError) as exc:
        await submit_template(intent, transport=transport)

    assert transport.submitted == []
    assert ErrorKind.policy_violation in exc.value.report.kinds()


@pytest.mark.asyncio
async def test_build_errors_propagate_without_submitting() -> None:
    transport = _FakeTransport()

    with pytest.raises(BuildError) as exc:
        await submit_template(_intent(header={"kind": "IMAGE"}), transport=transport)

    assert exc.value.kind == ErrorKind.missing_media_handle
    assert transport.submitted == []


@pytest.mark.asyncio
async def test_warnings_are_returned_with_the_outcome() -> None:
    transport = _FakeTransport()
    intent = _intent(buttons=[{"type": "catalog", "text": "View"}], message_send_ttl_seconds=86_400)

    outcome = await submit_template(intent, transport=transport)

    assert [w.location for w in outcome.warnings] == ["buttons[0]", "message_send_ttl_seconds"]
    assert len(transport.submitted) == 1


@pytest.mark.asyncio
async def test_upload_media_returns_real_handle() -> None:
    uploader = _FakeUploader("4::aW1hZ2UvanBlZw==:ARbXyZ")
    context = UploadContext(organization_id="org-1", media_kind=HeaderKind.image, filename="a.jpg")

    handle = await upload_media(uploader, b"\xff\xd8", context)

    assert handle == "4::aW1hZ2UvanBlZw==:ARbXyZ"
    assert uploader.calls == [context]


@pytest.mark.asyncio
async def test_upload_media_rejects_placeholder_handle() -> None:
    uploader = _FakeUploader("DYNAMIC_HANDLE_FROM_UPLOAD")
    context = UploadContext(organization_id="org-1", media_kind=HeaderKind.video)

    with pytest.raises(BuildError) as exc:
        await upload_media(uploader, b"", context)

    assert exc.value.kind == ErrorKind.invalid_media_handle


@pytest.mark.asyncio
async def test_app_submits_with_configured_options() -> None:
    transport = _FakeTransport()
    settings = Settings(TEMPLATE_DEFAULT_LANGUAGE="pt_BR", TEMPLATE_MARKETING_FOOTER="Envie SAIR para sair")
    app = create_app(settings, transport=transport)

    outcome = await app.submit(_intent(category="MARKETING", buttons=[{"type": "QUICK_REPLY", "text": "Stop"}]))

    assert outcome.document.language == "pt_BR"
    footer = outcome.document.to_payload()["components"][1]
    assert footer == {"type": "FOOTER", "text": "Envie SAIR para sair"}
    assert app.uploader is None


@pytest.mark.asyncio
async def test_app_uploads_through_configured_uploader() -> None:
    uploader = _FakeUploader("h-abcdef123456")
    settings = Settings(TEMPLATE_MIN_MEDIA_HANDLE_LENGTH=20)
    app = create_app(settings, transport=_FakeTransport(), uploader=uploader)
    context = UploadContext(organization_id="org-1", media_kind=HeaderKind.image)

    with pytest.raises(BuildError) as exc:
        await app.upload(b"\xff\xd8", context)

    assert exc.value.kind == ErrorKind.invalid_media_handle
    assert uploader.calls == [context]


@pytest.mark.asyncio
async def test_app_upload_returns_handle() -> None:
    uploader = _FakeUploader("4::aW1hZ2UvanBlZw==:ARbXyZ")
    app = create_app(Settings(), transport=_FakeTransport(), uploader=uploader)
    context = UploadContext(organization_id="org-1", media_kind=HeaderKind.document, filename="menu.pdf")

    assert await app.upload(b"%PDF", context) == "4::aW1hZ2UvanBlZw==:ARbXyZ"


@pytest.mark.asyncio
async def test_app_upload_requires_an_uploader() -> None:
    app = create_app(Settings(), transport=_FakeTransport())

    with pytest.raises(RuntimeError):
        await app.upload(b"", UploadContext(organization_id="org-1", media_kind=HeaderKind.image))
