"""Data models shared by the field variants."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .errors import FieldParseError


class FieldDiagnostic(BaseModel):
    """One entry of a field's error log, recorded on degraded construction."""

    model_config = {"frozen": True}

    name: str = Field(description="Header name the value was meant for")
    value: str | None = Field(default=None, description="Value that failed to parse")
    element: str = Field(description="Grammar element that rejected the value")
    reason: str = Field(description="Human-readable parse failure reason")

    @classmethod
    def from_error(cls, name: str, value: object, error: FieldParseError) -> FieldDiagnostic:
        return cls(
            name=name,
            value=None if value is None else str(value),
            element=error.element,
            reason=error.reason,
        )
