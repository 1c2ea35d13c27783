"""Environment configuration and validation.

This module defines strongly-typed settings loaded from environment variables (optionally via a
local `.env` file). The document builder never reads the environment itself: callers convert the
settings into explicit `BuildOptions` with `Settings.build_options()`.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.document.options import DEFAULT_OPT_OUT_FOOTER, FOOTER_MAX_LENGTH, BuildOptions


class Settings(BaseSettings):
    """Template engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_language: str = Field(default="en_US", alias="TEMPLATE_DEFAULT_LANGUAGE", min_length=2)
    marketing_opt_out_footer: str = Field(default=DEFAULT_OPT_OUT_FOOTER, alias="TEMPLATE_MARKETING_FOOTER")
    name_max_length: int = Field(default=512, alias="TEMPLATE_NAME_MAX_LENGTH", ge=1, le=512)
    default_otp_code: str = Field(default="123456", alias="TEMPLATE_DEFAULT_OTP_CODE", min_length=1)
    min_media_handle_length: int = Field(default=5, alias="TEMPLATE_MIN_MEDIA_HANDLE_LENGTH", ge=1)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("marketing_opt_out_footer")
    @classmethod
    def validate_footer(cls, value: str) -> str:
        """The synthesized footer must itself be a valid footer."""

        value = value.strip()
        if not value:
            raise ValueError("TEMPLATE_MARKETING_FOOTER must not be empty")
        if len(value) > FOOTER_MAX_LENGTH:
            raise ValueError(f"TEMPLATE_MARKETING_FOOTER must be at most {FOOTER_MAX_LENGTH} characters")
        return value

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    def build_options(self) -> BuildOptions:
        """Return the builder options derived from these settings."""

        return BuildOptions(
            default_language=self.default_language,
            marketing_opt_out_footer=self.marketing_opt_out_footer,
            name_max_length=self.name_max_length,
            default_otp_code=self.default_otp_code,
            min_media_handle_length=self.min_media_handle_length,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        # Raising here is fine: caller can decide how to handle startup errors.
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
