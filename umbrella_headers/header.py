"""An ordered collection of header fields.

Parsing a header block never fails as a whole: a line that cannot be split
into ``name: value`` is logged and dropped.  Serialization sorts fields by
the field order index, stable among fields of equal rank.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import structlog

from .config import get_settings
from .errors import HeaderSplitError
from .field import Field
from .registry import FieldRegistry, default_registry
from .splitter import split, split_header_block, unfold

logger = structlog.get_logger()


class Header:
    """Fields of one message or MIME part, in received order."""

    def __init__(
        self,
        raw: str | bytes | None = None,
        charset: str | None = None,
        *,
        registry: FieldRegistry | None = None,
    ) -> None:
        self.charset = charset or get_settings().default_charset
        self._registry = registry or default_registry
        self.fields: list[Field] = []
        if raw:
            self.parse(raw)

    def parse(self, raw: str | bytes) -> None:
        """Append every well-formed header line of *raw*."""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", "surrogateescape")
        for line in split_header_block(raw):
            try:
                name, value = split(unfold(line))
            except HeaderSplitError:
                logger.warning("header_line_dropped", raw=line)
                continue
            self.fields.append(Field(name, value, self.charset, registry=self._registry))

    def add_field(self, name: str, value: Any) -> Field:
        field = Field(name, value, self.charset, registry=self._registry)
        self.fields.append(field)
        return field

    def get(self, name: str) -> Field | None:
        """First field named *name* (case-insensitive), if any."""
        for field in self.fields:
            if field.responsible_for(name):
                return field
        return None

    def get_all(self, name: str) -> list[Field]:
        return [field for field in self.fields if field.responsible_for(name)]

    def remove(self, name: str) -> None:
        self.fields = [field for field in self.fields if not field.responsible_for(name)]

    def __getitem__(self, name: str) -> Field:
        field = self.get(name)
        if field is None:
            raise KeyError(name)
        return field

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def sorted_fields(self) -> list[Field]:
        """Fields in canonical order; unknown names keep their relative order."""
        return sorted(self.fields, key=lambda field: field.field_order_id)

    def encoded(self) -> str:
        return "".join(field.encoded() for field in self.sorted_fields())

    def decoded(self) -> str:
        return "\n".join(f"{field.name}: {field.decoded()}" for field in self.sorted_fields())
