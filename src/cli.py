"""Build (and optionally validate) a template document from an intent JSON file.

Usage:
    python -m src.cli intent.json [--validate] [--log-level DEBUG]

Prints a JSON object with the wire `document` and the advisory `warnings` (plus every `finding`
with `--validate`). Exits with status 1 on invalid intents, build errors and fatal findings.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.document.builder import build_document
from src.document.types import BuildError, ErrorKind
from src.document.validator import validate_document
from src.template.schema import intent_from_obj


def _print_json(obj: Any, *, stream: Any = None) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False), file=stream or sys.stdout)


def _error(kind: ErrorKind, reason: str) -> int:
    _print_json({"error": str(kind), "reason": reason}, stream=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""

    parser = argparse.ArgumentParser(description="Compile a message template intent into its wire document.")
    parser.add_argument("path", help="Path to the intent JSON file.")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run the pre-submission validator and fail on fatal findings.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)
    options = settings.build_options()

    try:
        obj = json.loads(Path(args.path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        return _error(ErrorKind.invalid_intent, f"cannot read intent file: {exc}")

    try:
        intent = intent_from_obj(obj)
    except ValidationError as exc:
        return _error(ErrorKind.invalid_intent, str(exc))

    try:
        built = build_document(intent, options=options)
    except BuildError as exc:
        return _error(exc.kind, exc.reason)

    output: dict[str, Any] = {
        "document": built.document.to_payload(),
        "warnings": [f.to_dict() for f in built.warnings],
    }
    status = 0
    if args.validate:
        report = validate_document(built.document, intent, options=options)
        output["findings"] = [f.to_dict() for f in report.findings]
        status = 0 if report.ok else 1

    _print_json(output)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
