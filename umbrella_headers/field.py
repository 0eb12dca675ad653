"""The ``Field`` facade: one header, parsed lazily into its structured variant.

Per RFC 2822 §2.2 a header field is a name, a colon and a body.  ``Field``
works out which variant handles the name and exposes it uniformly::

    Field("Subject: =?UTF-8?B?SGVsbG8=?=")       # combined text, parsed on first access
    Field("To", "Ann <ann@example.com>")          # name/value pair
    Field("Content-Type", ("text/plain", {"charset": "utf-8"}))
    Field("Message-ID")                           # bare name

For the combined form a non-empty second argument is taken as the charset.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import structlog

from .config import get_settings
from .errors import HeaderSplitError
from .fields import CommonField
from .models import FieldDiagnostic
from .registry import FieldRegistry, create_field, default_registry
from .repair import repair_value
from .splitter import field_prefix, fold, split, unfold

logger = structlog.get_logger()


class FieldState(str, Enum):
    """Whether the variant behind a field has been built yet."""

    UNPARSED = "unparsed"
    PARSED = "parsed"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", "surrogateescape")
    return value


class Field:
    """A named header unit wrapping a lazily built structured variant."""

    def __init__(
        self,
        name: str | bytes,
        value: Any = None,
        charset: str | None = None,
        *,
        registry: FieldRegistry | None = None,
    ) -> None:
        self._registry = registry or default_registry
        self._field: CommonField | None = None
        self._field_order_id: int | None = None
        charset = charset or get_settings().default_charset
        name = _as_text(name)
        value = _as_text(value)

        if ":" in name:
            self.charset = charset if _blank(value) else value
            self.raw_value: str | None = name
            self._value: Any = None
            name = field_prefix(name)
        else:
            self.charset = charset
            self.raw_value = None
            self._value = None if _blank(value) else value
        self._name = self._registry.display_name(name.strip())

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> FieldState:
        return FieldState.UNPARSED if self._field is None else FieldState.PARSED

    @property
    def field(self) -> CommonField:
        """The structured variant, built on first access and memoized."""
        if self._field is None:
            value = self._split_raw() if self.raw_value is not None else self._value
            self._field = self._create(value, strict=False)
        return self._field

    @field.setter
    def field(self, variant: CommonField) -> None:
        self._field = variant

    def _split_raw(self) -> str | None:
        try:
            _, value = split(unfold(self.raw_value))
        except HeaderSplitError:
            logger.warning("header_split_failed", raw=self.raw_value)
            return None
        return value

    def _create(self, value: Any, *, strict: bool) -> CommonField:
        value = _as_text(value)
        if isinstance(value, str):
            value = repair_value(self._name, unfold(value).strip())
        return create_field(self._name, value, self.charset, registry=self._registry, strict=strict)

    # ------------------------------------------------------------------
    # Value access
    # ------------------------------------------------------------------

    @property
    def value(self) -> str:
        return self.field.value

    @value.setter
    def value(self, value: Any) -> None:
        """Replace the value; raises ``FieldSyntaxError`` if the grammar rejects it."""
        self._field = self._create(value, strict=True)
        self._value = _as_text(value)
        self.raw_value = None

    def update(self, name: str, value: Any) -> None:
        """Re-dispatch with a new name and value, degrading instead of raising."""
        self._name = self._registry.display_name(name)
        self._field_order_id = None
        self._value = _as_text(value)
        self.raw_value = None
        self._field = self._create(value, strict=False)

    @property
    def errors(self) -> list[FieldDiagnostic]:
        return self.field.errors

    def to_s(self) -> str:
        """Wire text of the field body."""
        return self.field.render()

    def decoded(self) -> str:
        return self.field.decoded()

    def encoded(self) -> str:
        """The folded ``Name: body`` line, CRLF terminated."""
        return fold(self._name, self.to_s(), get_settings().fold_line_length)

    def __str__(self) -> str:
        return self.to_s()

    def __repr__(self) -> str:
        if self._field is None:
            return f"<Field {self._name!r} state={self.state.value} raw_value={self.raw_value!r}>"
        return f"<Field {self._name!r} state={self.state.value} variant={type(self._field).__name__}>"

    # ------------------------------------------------------------------
    # Comparison and ordering
    # ------------------------------------------------------------------

    def same(self, other: Field) -> bool:
        return self._name.lower() == other.name.lower()

    def responsible_for(self, name: str) -> bool:
        return self._name.lower() == str(name).lower()

    @property
    def field_order_id(self) -> int:
        if self._field_order_id is None:
            self._field_order_id = self._registry.order_of(self._name)
        return self._field_order_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return self.same(other)

    def __hash__(self) -> int:
        return hash(self._name.lower())

    def __lt__(self, other: Field) -> bool:
        return self.field_order_id < other.field_order_id

    def __gt__(self, other: Field) -> bool:
        return self.field_order_id > other.field_order_id

    def __le__(self, other: Field) -> bool:
        return self.field_order_id <= other.field_order_id

    def __ge__(self, other: Field) -> bool:
        return self.field_order_id >= other.field_order_id

    # ------------------------------------------------------------------
    # Variant capabilities
    # ------------------------------------------------------------------

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith("_"):
            raise AttributeError(attr)
        variant = self.field
        if attr in variant.capabilities:
            return getattr(variant, attr)
        raise AttributeError(f"{type(variant).__name__} for {self._name!r} has no attribute {attr!r}")
