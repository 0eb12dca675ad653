"""Error kinds raised while splitting, parsing and assigning header fields."""

from __future__ import annotations

from typing import Any


class FieldError(Exception):
    """Base exception for header field errors."""


class FieldParseError(FieldError):
    """Raised when a structured field cannot parse the value it was given.

    Recoverable: the dispatcher catches it and falls back to an
    unstructured field that keeps the raw text.
    """

    def __init__(self, element: str, value: Any, reason: str) -> None:
        self.element = element
        self.value = value
        self.reason = reason
        super().__init__(f"{element} can not parse |{value}|\nReason was: {reason}")


class FieldSyntaxError(FieldError):
    """Raised when a caller assigns a value the field grammar cannot represent."""


class HeaderSplitError(FieldError):
    """Raised when a raw header line is not ``name: value`` delimited."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Could not split header line {raw!r}")
