"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.cli import main


def _write(tmp_path: Path, obj: object) -> str:
    path = tmp_path / "intent.json"
    path.write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep a developer's local .env out of the run.
    monkeypatch.chdir(tmp_path)


def test_cli_prints_document(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {"name": "Order Update", "category": "utility", "body": {"text": "Order {{1}} shipped"}})

    status = main([path])

    out = json.loads(capsys.readouterr().out)
    assert status == 0
    assert out["document"]["name"] == "order_update"
    assert out["document"]["category"] == "UTILITY"
    assert out["warnings"] == []
    assert "findings" not in out


def test_cli_validate_fails_on_fatal_findings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(
        tmp_path,
        {
            "name": "Login",
            "category": "AUTHENTICATION",
            "header": {"kind": "TEXT", "text": "Verify ✅"},
            "body": {"text": "{{1}} is your verification code."},
        },
    )

    status = main([path, "--validate"])

    out = json.loads(capsys.readouterr().out)
    assert status == 1
    assert any(f["kind"] == "PolicyViolation" and f["fatal"] for f in out["findings"])


def test_cli_reports_invalid_intent(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {"name": "No Category", "body": {"text": "Hi"}})

    status = main([path])

    err = json.loads(capsys.readouterr().err)
    assert status == 1
    assert err["error"] == "InvalidIntent"


def test_cli_reports_unreadable_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    status = main([str(path)])

    assert status == 1
    assert json.loads(capsys.readouterr().err)["error"] == "InvalidIntent"


def test_cli_reports_build_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(
        tmp_path,
        {"name": "Promo", "category": "MARKETING", "header": {"kind": "IMAGE"}, "body": {"text": "Hello"}},
    )

    status = main([path])

    err = json.loads(capsys.readouterr().err)
    assert status == 1
    assert err["error"] == "MissingMediaHandle"
