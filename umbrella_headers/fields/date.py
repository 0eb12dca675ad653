"""Date-bearing fields: Date, Resent-Date and Received."""

from __future__ import annotations

import email.utils
from datetime import datetime
from typing import Any

from ..splitter import unfold
from .base import StructuredField


def parse_date_time(text: str) -> datetime:
    """Parse an RFC 2822 date-time; raises ``ValueError`` when it is not one."""
    try:
        parsed = email.utils.parsedate_to_datetime(text.strip())
    except (TypeError, IndexError) as exc:
        raise ValueError(str(exc)) from exc
    if parsed is None:
        raise ValueError(f"not a date-time: {text!r}")
    return parsed


class DateField(StructuredField):
    """RFC 2822 ``orig-date``.  A blank value means "now"."""

    NAME = "date"
    CAPITALIZED_FIELD = "Date"
    capabilities = ("date_time",)

    def parse(self, value: Any) -> None:
        if self.blank(value):
            self.date_time = datetime.now().astimezone()
        elif isinstance(value, datetime):
            self.date_time = value
        elif isinstance(value, str):
            try:
                self.date_time = parse_date_time(value)
            except ValueError as exc:
                self.fail(value, str(exc))
        else:
            self.fail(value, f"unsupported date value {type(value).__name__}")

    def decoded(self) -> str:
        return self.render()

    def render(self) -> str:
        return email.utils.format_datetime(self.date_time)


class ResentDateField(DateField):
    NAME = "resent-date"
    CAPITALIZED_FIELD = "Resent-Date"


class ReceivedField(StructuredField):
    """Trace field: ``received-tokens; date-time``."""

    NAME = "received"
    CAPITALIZED_FIELD = "Received"
    capabilities = ("info", "date_time")

    def parse(self, value: Any) -> None:
        self.info = ""
        self.date_time: datetime | None = None
        if self.blank(value):
            return
        if not isinstance(value, str):
            self.fail(value, f"unsupported received value {type(value).__name__}")
        if ";" not in value:
            self.fail(value, "missing ';' before date-time")
        info, _, date_text = value.rpartition(";")
        try:
            self.date_time = parse_date_time(date_text)
        except ValueError as exc:
            self.fail(value, str(exc))
        self.info = unfold(info).strip()

    def decoded(self) -> str:
        return self.render()

    def render(self) -> str:
        if self.date_time is None:
            return ""
        return f"{self.info}; {email.utils.format_datetime(self.date_time)}"
