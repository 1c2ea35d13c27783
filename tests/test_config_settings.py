"""Tests for environment settings and their conversion into builder options."""

from __future__ import annotations

import pytest

from src.config.settings import Settings, load_settings
from src.document.options import BuildOptions

_ENV_VARS = (
    "TEMPLATE_DEFAULT_LANGUAGE",
    "TEMPLATE_MARKETING_FOOTER",
    "TEMPLATE_NAME_MAX_LENGTH",
    "TEMPLATE_DEFAULT_OTP_CODE",
    "TEMPLATE_MIN_MEDIA_HANDLE_LENGTH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_builder_defaults() -> None:
    settings = load_settings()
    assert settings.log_level == "INFO"
    assert settings.build_options() == BuildOptions()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMPLATE_DEFAULT_LANGUAGE", "pt_BR")
    monkeypatch.setenv("TEMPLATE_DEFAULT_OTP_CODE", "000111")
    monkeypatch.setenv("TEMPLATE_NAME_MAX_LENGTH", "64")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()
    options = settings.build_options()

    assert settings.log_level == "DEBUG"
    assert options.default_language == "pt_BR"
    assert options.default_otp_code == "000111"
    assert options.name_max_length == 64


def test_dotenv_file_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text("TEMPLATE_MIN_MEDIA_HANDLE_LENGTH=12\n", encoding="utf-8")
    assert load_settings().min_media_handle_length == 12


@pytest.mark.parametrize("footer", ["   ", "x" * 61])
def test_invalid_marketing_footer_fails_startup(monkeypatch: pytest.MonkeyPatch, footer: str) -> None:
    monkeypatch.setenv("TEMPLATE_MARKETING_FOOTER", footer)
    with pytest.raises(RuntimeError):
        load_settings()


def test_name_max_length_is_bounded() -> None:
    with pytest.raises(ValueError):
        Settings(TEMPLATE_NAME_MAX_LENGTH=1000)
