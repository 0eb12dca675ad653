"""Shared lifecycle of every header field variant.

A variant is built from ``(value, charset)``, parses the value in its
constructor (raising ``FieldParseError`` when its grammar rejects it) and
renders itself back to wire text with ``render()``.
"""

from __future__ import annotations

from typing import Any, NoReturn

from ..config import get_settings
from ..encodings import b_value_encode, is_ascii, value_decode
from ..errors import FieldParseError
from ..models import FieldDiagnostic
from ..splitter import fold


class CommonField:
    """Base class for all variants.

    Subclasses set ``NAME`` (lower case, used for registry lookup),
    ``CAPITALIZED_FIELD`` (display name) and ``capabilities``: the public
    accessors the ``Field`` facade may forward to.
    """

    NAME: str = ""
    CAPITALIZED_FIELD: str = ""
    capabilities: tuple[str, ...] = ()

    def __init__(self, value: Any = None, charset: str = "utf-8", *, name: str | None = None) -> None:
        self.name = name or self.CAPITALIZED_FIELD
        self.charset = charset
        self.errors: list[FieldDiagnostic] = []
        self.parse(value)

    def parse(self, value: Any) -> None:
        raise NotImplementedError

    @property
    def value(self) -> str:
        """The field value as display text (encoded words decoded)."""
        return self.decoded()

    def decoded(self) -> str:
        raise NotImplementedError

    def render(self) -> str:
        """The field body as wire text: US-ASCII, encoded where needed."""
        raise NotImplementedError

    def encoded(self) -> str:
        """The whole header line, folded and CRLF terminated."""
        return fold(self.name, self.render(), get_settings().fold_line_length)

    def fail(self, value: Any, reason: str) -> NoReturn:
        raise FieldParseError(type(self).__name__, value, reason)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}: {self.render()!r}>"


class UnstructuredField(CommonField):
    """Free text field; never rejects a value.

    Also used as the degraded fallback when a structured grammar fails, so
    rendering must give back ASCII input exactly as it was received.
    """

    CAPITALIZED_FIELD = "X-Unknown"

    def parse(self, value: Any) -> None:
        if value is None:
            value = ""
        elif not isinstance(value, str):
            value = str(value)
        self.raw_value = value
        self._decoded = value_decode(value)

    def decoded(self) -> str:
        return self._decoded

    def render(self) -> str:
        if is_ascii(self.raw_value):
            return self.raw_value
        return b_value_encode(self._decoded, self.charset)


class OptionalField(UnstructuredField):
    """Generic variant for header names with no known grammar."""


class StructuredField(CommonField):
    """Base for variants with a grammar; blank values are normalized to ``""``."""

    @staticmethod
    def blank(value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())
