"""Builder options.

The builder never reads the environment; callers pass options explicitly (see
`Settings.build_options()`). Defaults match the settings defaults.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.document.media import DEFAULT_MIN_HANDLE_LENGTH
from src.template.normalize import DEFAULT_NAME_MAX_LENGTH
from src.template.samples import SampleStrategy, default_sample

FOOTER_MAX_LENGTH = 60
DEFAULT_OPT_OUT_FOOTER = "Reply STOP to opt out"


@dataclass(frozen=True)
class BuildOptions:
    """Policy defaults and limits applied while building a document."""

    default_language: str = "en_US"
    marketing_opt_out_footer: str = DEFAULT_OPT_OUT_FOOTER
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH
    default_otp_code: str = "123456"
    min_media_handle_length: int = DEFAULT_MIN_HANDLE_LENGTH
    sample_strategy: SampleStrategy = default_sample
