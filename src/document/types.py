"""Wire document types and the error taxonomy shared by the builder and the validator."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.template.schema import Category


class ErrorKind(StrEnum):
    """Kinds of build errors and validation findings."""

    missing_media_handle = "MissingMediaHandle"
    invalid_media_handle = "InvalidMediaHandle"
    missing_flow_id = "MissingFlowId"
    missing_button_target = "MissingButtonTarget"
    invalid_card_count = "InvalidCardCount"
    card_missing_button = "CardMissingButton"
    invalid_card_button_count = "InvalidCardButtonCount"
    invalid_intent = "InvalidIntent"
    compliance_error = "ComplianceError"
    policy_warning = "PolicyWarning"
    policy_violation = "PolicyViolation"


class SectionType(StrEnum):
    """Top-level (and card-level) component types of a document."""

    header = "HEADER"
    body = "BODY"
    footer = "FOOTER"
    buttons = "BUTTONS"
    carousel = "CAROUSEL"


class BuildError(ValueError):
    """Raised when an Intent cannot be compiled into a wire Document. No partial output exists."""

    def __init__(self, kind: ErrorKind, reason: str) -> None:
        super().__init__(f"{kind}: {reason}")
        self.kind = kind
        self.reason = reason


@dataclass(frozen=True)
class Finding:
    """One validator (or builder) observation. Non-fatal findings are advisory."""

    kind: ErrorKind
    message: str
    fatal: bool = False
    location: str = "document"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "message": self.message,
            "fatal": self.fatal,
            "location": self.location,
        }


def warning(message: str, *, location: str = "document") -> Finding:
    """Build an advisory `PolicyWarning` finding."""

    return Finding(kind=ErrorKind.policy_warning, message=message, fatal=False, location=location)


@dataclass(frozen=True)
class ValidationReport:
    """All findings for one document, in check order."""

    findings: tuple[Finding, ...] = ()

    @property
    def errors(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.fatal)

    @property
    def warnings(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if not f.fatal)

    @property
    def ok(self) -> bool:
        """Whether the document may be submitted (no fatal findings)."""

        return not self.errors

    def kinds(self) -> set[ErrorKind]:
        return {f.kind for f in self.findings}


class DocumentValidationError(ValueError):
    """Raised when a document has fatal findings and must not be submitted."""

    def __init__(self, report: ValidationReport) -> None:
        kinds = ", ".join(sorted({str(f.kind) for f in report.errors}))
        super().__init__(f"document rejected: {kinds}")
        self.report = report


@dataclass(frozen=True)
class Document:
    """A schema-correct, ready-to-submit template.

    `components` holds the ordered wire sections (plain dicts shaped exactly as the platform
    expects). Consumers must treat them as read-only; use `to_payload()` for a mutable copy.
    """

    name: str
    language: str
    category: Category
    components: tuple[dict[str, Any], ...]
    message_send_ttl_seconds: int | None = None

    def sections(self, section_type: SectionType) -> list[dict[str, Any]]:
        return [c for c in self.components if c.get("type") == section_type]

    def section(self, section_type: SectionType) -> dict[str, Any] | None:
        found = self.sections(section_type)
        return found[0] if found else None

    def to_payload(self) -> dict[str, Any]:
        """Return the wire JSON object (a deep copy)."""

        payload: dict[str, Any] = {
            "name": self.name,
            "language": self.language,
            "category": str(self.category),
            "components": copy.deepcopy(list(self.components)),
        }
        if self.message_send_ttl_seconds is not None:
            payload["message_send_ttl_seconds"] = self.message_send_ttl_seconds
        return payload


@dataclass(frozen=True)
class BuildResult:
    """A built document plus the advisory warnings raised while building it."""

    document: Document
    warnings: tuple[Finding, ...] = field(default_factory=tuple)
