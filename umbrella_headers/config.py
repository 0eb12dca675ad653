"""Header engine configuration loaded from environment variables.

Uses pydantic-settings so every default can be overridden via env vars
(``UMBRELLA_HEADERS_*``) without touching calling code.
"""

from __future__ import annotations

import threading

from pydantic import Field
from pydantic_settings import BaseSettings


class HeaderSettings(BaseSettings):
    """Defaults used when encoding, folding and repairing header text."""

    model_config = {"env_prefix": "UMBRELLA_HEADERS_", "frozen": True}

    default_charset: str = Field(
        default="utf-8",
        description="Charset used for outgoing encoded words when none is given",
    )
    param_encode_language: str = Field(
        default="en",
        description="Language tag written into RFC 2231 extended parameters",
    )
    max_encoded_word_length: int = Field(
        default=75,
        ge=16,
        description="Maximum length of a single =?charset?X?...?= word",
    )
    fold_line_length: int = Field(
        default=78,
        ge=20,
        description="Preferred maximum line length when folding header lines",
    )
    fallback_encoding: str = Field(
        default="utf-8",
        description="Encoding assumed when charset detection is inconclusive",
    )
    replacement_char: str = Field(
        default="_",
        min_length=1,
        max_length=1,
        description="Placeholder for byte sequences that cannot be converted",
    )


_settings: HeaderSettings | None = None
_settings_lock = threading.Lock()


def get_settings() -> HeaderSettings:
    """Return the process-wide settings, building them on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = HeaderSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    with _settings_lock:
        _settings = None
