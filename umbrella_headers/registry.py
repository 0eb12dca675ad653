"""Field registry — maps header names to structured variants.

Lookup is case-insensitive.  Unknown names get ``OptionalField``.  New
variants can be registered while a registry is being set up; the first
lookup freezes it, after which it is read-only and safe to share between
threads.
"""

from __future__ import annotations

import threading
from typing import Any

import structlog

from .errors import FieldParseError, FieldSyntaxError
from .fields import KNOWN_VARIANTS, CommonField, OptionalField, UnstructuredField
from .models import FieldDiagnostic

logger = structlog.get_logger()

FIELD_ORDER = (
    "return-path", "received",
    "resent-date", "resent-from", "resent-sender", "resent-to",
    "resent-cc", "resent-bcc", "resent-message-id",
    "date", "from", "sender", "reply-to", "to", "cc", "bcc",
    "message-id", "in-reply-to", "references",
    "subject", "comments", "keywords",
    "mime-version", "content-type", "content-transfer-encoding",
    "content-location", "content-disposition", "content-description",
)

FIELD_ORDER_LOOKUP = {name: index for index, name in enumerate(FIELD_ORDER)}

UNKNOWN_FIELD_ORDER = 100


class FieldRegistry:
    """Registry of field variants, keyed by lower-case field name."""

    def __init__(self, variants: tuple[type[CommonField], ...] = ()) -> None:
        self._variants: dict[str, type[CommonField]] = {}
        self._display_names: dict[str, str] = {}
        self._frozen = False
        self._lock = threading.Lock()
        for variant in variants:
            self.register(variant)

    def register(self, variant: type[CommonField]) -> None:
        """Register *variant* under its ``NAME``; only before the first lookup."""
        if not variant.NAME:
            raise ValueError(f"{variant.__name__} has no NAME")
        with self._lock:
            if self._frozen:
                raise RuntimeError("field registry is frozen; register variants before first use")
            self._variants[variant.NAME] = variant
            self._display_names[variant.NAME] = variant.CAPITALIZED_FIELD

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> type[CommonField]:
        """Variant class for header *name*; ``OptionalField`` when unknown."""
        if not self._frozen:
            self.freeze()
        return self._variants.get(name.lower(), OptionalField)

    def display_name(self, name: str) -> str:
        """Canonical capitalization of *name*, or *name* itself when unknown."""
        return self._display_names.get(name.lower(), name)

    def order_of(self, name: str) -> int:
        return FIELD_ORDER_LOOKUP.get(name.lower(), UNKNOWN_FIELD_ORDER)

    @property
    def supported_fields(self) -> list[str]:
        return list(self._variants.keys())


default_registry = FieldRegistry(KNOWN_VARIANTS)


def new_field(
    name: str,
    value: Any,
    charset: str,
    registry: FieldRegistry | None = None,
) -> CommonField:
    """Build the variant for *name*; raises ``FieldParseError`` on bad input."""
    registry = registry or default_registry
    variant = registry.resolve(name)
    if variant is OptionalField:
        return OptionalField(value, charset, name=name)
    return variant(value, charset)


def create_field(
    name: str,
    value: Any,
    charset: str,
    *,
    registry: FieldRegistry | None = None,
    strict: bool = False,
) -> CommonField:
    """Build the variant for *name*, degrading to ``UnstructuredField``.

    With ``strict=True`` (a caller assigning a value) a grammar rejection
    is raised as ``FieldSyntaxError`` instead.
    """
    try:
        return new_field(name, value, charset, registry)
    except FieldParseError as exc:
        if strict:
            raise FieldSyntaxError(str(exc)) from exc
        logger.debug("field_parse_fallback", name=name, element=exc.element, reason=exc.reason)
        field = UnstructuredField(value, charset, name=(registry or default_registry).display_name(name))
        field.errors.append(FieldDiagnostic.from_error(name, value, exc))
        return field
