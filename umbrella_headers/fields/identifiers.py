"""Identifier fields: Message-ID, Resent-Message-ID, Content-ID, In-Reply-To, References."""

from __future__ import annotations

import email.utils
import re
import socket
from typing import Any

from .base import StructuredField

MSG_ID = re.compile(r"<([^<>\s]*)>")
BARE_MSG_ID = re.compile(r"\A[^<>\s@]+@[^<>\s@]+\Z")
_COMMENT = re.compile(r"\([^()]*\)")


def extract_msg_ids(text: str) -> tuple[list[str], str]:
    """Pull every ``<id>`` out of *text*; returns the ids and the leftovers."""
    ids = MSG_ID.findall(text)
    leftover = _COMMENT.sub(" ", MSG_ID.sub(" ", text)).strip()
    return ids, leftover


def make_msg_id() -> str:
    return email.utils.make_msgid(domain=socket.gethostname() or "localhost").strip("<>")


class MessageIdsField(StructuredField):
    """Whitespace separated ``<id-left@id-right>`` list."""

    capabilities = ("message_ids", "message_id")

    def parse(self, value: Any) -> None:
        self.message_ids: list[str] = []
        if self.blank(value):
            return
        if isinstance(value, (list, tuple)):
            value = " ".join(v if v.startswith("<") else f"<{v}>" for v in map(str, value))
        elif not isinstance(value, str):
            self.fail(value, f"unsupported msg-id value {type(value).__name__}")

        text = value.strip()
        if BARE_MSG_ID.match(text):
            ids, leftover = [text], ""
        else:
            ids, leftover = extract_msg_ids(text)
        if leftover:
            self.fail(value, f"unexpected text {leftover!r} outside msg-id")
        if not ids:
            self.fail(value, "no msg-id found")
        for msg_id in ids:
            if "@" not in msg_id:
                self.fail(value, f"msg-id {msg_id!r} has no '@'")
        self.message_ids = ids

    @property
    def message_id(self) -> str | None:
        return self.message_ids[0] if self.message_ids else None

    def decoded(self) -> str:
        return self.render()

    def render(self) -> str:
        return " ".join(f"<{msg_id}>" for msg_id in self.message_ids)


class InReplyToField(MessageIdsField):
    NAME = "in-reply-to"
    CAPITALIZED_FIELD = "In-Reply-To"


class ReferencesField(MessageIdsField):
    NAME = "references"
    CAPITALIZED_FIELD = "References"


class MessageIdField(MessageIdsField):
    """Exactly one msg-id; a blank value gets a freshly generated one."""

    NAME = "message-id"
    CAPITALIZED_FIELD = "Message-ID"

    def parse(self, value: Any) -> None:
        if self.blank(value):
            value = f"<{make_msg_id()}>"
        super().parse(value)
        if len(self.message_ids) != 1:
            self.fail(value, "exactly one msg-id allowed")


class ResentMessageIdField(MessageIdField):
    NAME = "resent-message-id"
    CAPITALIZED_FIELD = "Resent-Message-ID"


class ContentIdField(MessageIdField):
    NAME = "content-id"
    CAPITALIZED_FIELD = "Content-ID"
    capabilities = ("content_id", "message_id")

    @property
    def content_id(self) -> str | None:
        return self.message_id
