"""Address-bearing fields: From, To, Cc, Bcc, Reply-To, Sender, Resent-*, Return-Path."""

from __future__ import annotations

import email.utils
import re
from dataclasses import dataclass
from typing import Any

from ..encodings import address_encode, value_decode
from .base import StructuredField

_SPECIALS = re.compile(r'[()<>@,;:\\".\[\]]')
_EMPTY_GROUP = re.compile(r"\A[^:<>@,]+:\s*;\Z")


@dataclass(frozen=True)
class Address:
    """One mailbox: an optional display name and an addr-spec."""

    display_name: str
    addr_spec: str

    @property
    def domain(self) -> str:
        return self.addr_spec.rsplit("@", 1)[-1] if "@" in self.addr_spec else ""

    @property
    def local(self) -> str:
        return self.addr_spec.rsplit("@", 1)[0]

    def format(self) -> str:
        if not self.display_name:
            return self.addr_spec
        name = self.display_name
        if _SPECIALS.search(name):
            escaped = name.replace("\\", "\\\\").replace('"', '\\"')
            name = f'"{escaped}"'
        return f"{name} <{self.addr_spec}>"

    def __str__(self) -> str:
        return self.format()


class AddressListField(StructuredField):
    """Comma separated list of mailboxes."""

    MULTIPLE = True
    ALLOW_NULL_ADDRESS = False
    capabilities = ("addrs", "addresses", "address", "display_names", "formatted", "group")

    def parse(self, value: Any) -> None:
        self.addrs: list[Address] = []
        self.group: str | None = None
        if self.blank(value):
            return
        if isinstance(value, Address):
            value = value.format()
        elif isinstance(value, (list, tuple)):
            value = ", ".join(v.format() if isinstance(v, Address) else str(v) for v in value)
        elif not isinstance(value, str):
            self.fail(value, f"unsupported address value {type(value).__name__}")

        text = value.strip()
        if self.ALLOW_NULL_ADDRESS and text == "<>":
            return
        if _EMPTY_GROUP.match(text):
            self.group = text
            return

        for name, addr in email.utils.getaddresses([text]):
            if not name and not addr:
                continue
            if "@" not in addr:
                self.fail(value, f"{addr or name!r} is not an addr-spec")
            self.addrs.append(Address(value_decode(name), addr))

        if not self.addrs:
            self.fail(value, "no mailbox found")
        if not self.MULTIPLE and len(self.addrs) > 1:
            self.fail(value, "only one mailbox allowed")

    @property
    def addresses(self) -> list[str]:
        return [a.addr_spec for a in self.addrs]

    @property
    def address(self) -> str | None:
        return self.addrs[0].addr_spec if self.addrs else None

    @property
    def display_names(self) -> list[str]:
        return [a.display_name for a in self.addrs]

    @property
    def formatted(self) -> list[str]:
        return [a.format() for a in self.addrs]

    def decoded(self) -> str:
        if self.group is not None:
            return self.group
        return ", ".join(self.formatted)

    def render(self) -> str:
        if self.group is not None:
            return self.group
        return address_encode(self.formatted, self.charset)


class ToField(AddressListField):
    NAME = "to"
    CAPITALIZED_FIELD = "To"


class CcField(AddressListField):
    NAME = "cc"
    CAPITALIZED_FIELD = "Cc"


class BccField(AddressListField):
    NAME = "bcc"
    CAPITALIZED_FIELD = "Bcc"


class FromField(AddressListField):
    NAME = "from"
    CAPITALIZED_FIELD = "From"


class ReplyToField(AddressListField):
    NAME = "reply-to"
    CAPITALIZED_FIELD = "Reply-To"


class SenderField(AddressListField):
    NAME = "sender"
    CAPITALIZED_FIELD = "Sender"
    MULTIPLE = False


class ResentFromField(AddressListField):
    NAME = "resent-from"
    CAPITALIZED_FIELD = "Resent-From"


class ResentSenderField(AddressListField):
    NAME = "resent-sender"
    CAPITALIZED_FIELD = "Resent-Sender"
    MULTIPLE = False


class ResentToField(AddressListField):
    NAME = "resent-to"
    CAPITALIZED_FIELD = "Resent-To"


class ResentCcField(AddressListField):
    NAME = "resent-cc"
    CAPITALIZED_FIELD = "Resent-Cc"


class ResentBccField(AddressListField):
    NAME = "resent-bcc"
    CAPITALIZED_FIELD = "Resent-Bcc"


class ReturnPathField(AddressListField):
    """``<addr-spec>`` or the null path ``<>``."""

    NAME = "return-path"
    CAPITALIZED_FIELD = "Return-Path"
    MULTIPLE = False
    ALLOW_NULL_ADDRESS = True

    def decoded(self) -> str:
        return self.render()

    def render(self) -> str:
        return f"<{self.address or ''}>"
