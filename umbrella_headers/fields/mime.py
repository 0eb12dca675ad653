"""MIME fields: Content-Type, Content-Disposition, Content-Transfer-Encoding,
MIME-Version and Content-Location.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .. import transfer
from ..encodings import TOKEN_UNSAFE
from .base import StructuredField
from .parameters import TOKEN, ParameterList, unquote_string

_MIME_TYPE = re.compile(r"\A([!#$%&'*+\-.0-9A-Z^_`a-z{|}~]+)/([!#$%&'*+\-.0-9A-Z^_`a-z{|}~]+)\Z")
_VERSION = re.compile(r"\A(\d+)\s*\.\s*(\d+)\Z")
_COMMENT = re.compile(r"\([^()]*\)")


class ParameterizedField(StructuredField):
    """``head; key=value; ...`` where ``head`` is checked by the subclass."""

    def parse_head(self, value: Any, head: str) -> None:
        raise NotImplementedError

    def head(self) -> str:
        raise NotImplementedError

    def parse(self, value: Any) -> None:
        if isinstance(value, str):
            head, _, rest = value.strip().partition(";")
            self.parse_head(value, head.strip())
            try:
                self.parameters = ParameterList.parse(rest)
            except ValueError as exc:
                self.fail(value, str(exc))
        else:
            self.parse_structured(value)

    def parse_structured(self, value: Any) -> None:
        self.fail(value, f"unsupported value {type(value).__name__}")

    def set_parameters(self, value: Any, params: Any) -> None:
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            self.fail(value, "parameters must be a mapping")
        self.parameters = ParameterList((str(k).lower(), str(v)) for k, v in params.items())

    @property
    def filename(self) -> str | None:
        return self.parameters.get("filename") or self.parameters.get("name")

    def decoded(self) -> str:
        params = self.parameters.decoded()
        return f"{self.head()}; {params}" if params else self.head()

    def render(self) -> str:
        params = self.parameters.render(self.charset)
        return f"{self.head()}; {params}" if params else self.head()


class ContentTypeField(ParameterizedField):
    """``type/subtype; params``.

    Besides text, accepts ``(mime_type, params)`` or
    ``(main_type, sub_type, params)`` with *params* a mapping.
    """

    NAME = "content-type"
    CAPITALIZED_FIELD = "Content-Type"
    capabilities = ("main_type", "sub_type", "mime_type", "parameters", "filename")

    def parse(self, value: Any) -> None:
        if self.blank(value):
            value = "text/plain"
        super().parse(value)

    def parse_head(self, value: Any, head: str) -> None:
        match = _MIME_TYPE.match(head)
        if match is None:
            self.fail(value, f"{head!r} is not a type/subtype")
        self.main_type = match.group(1).lower()
        self.sub_type = match.group(2).lower()

    def parse_structured(self, value: Any) -> None:
        if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
            self.fail(value, "expected (mime_type, params) or (main_type, sub_type, params)")
        if len(value) == 2:
            head, params = value
        else:
            head, params = f"{value[0]}/{value[1]}", value[2]
        self.parse_head(value, str(head).strip())
        self.set_parameters(value, params)

    @property
    def mime_type(self) -> str:
        return f"{self.main_type}/{self.sub_type}"

    def head(self) -> str:
        return self.mime_type


class ContentDispositionField(ParameterizedField):
    NAME = "content-disposition"
    CAPITALIZED_FIELD = "Content-Disposition"
    capabilities = ("disposition_type", "parameters", "filename")

    def parse_head(self, value: Any, head: str) -> None:
        if not TOKEN.match(head):
            self.fail(value, f"{head!r} is not a disposition type")
        self.disposition_type = head.lower()

    def parse_structured(self, value: Any) -> None:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            self.fail(value, "expected (disposition_type, params)")
        self.parse_head(value, str(value[0]).strip())
        self.set_parameters(value, value[1])

    def head(self) -> str:
        return self.disposition_type


class ContentTransferEncodingField(StructuredField):
    """Mechanism token; a blank value means ``7bit``."""

    NAME = "content-transfer-encoding"
    CAPITALIZED_FIELD = "Content-Transfer-Encoding"
    capabilities = ("encoding",)

    def parse(self, value: Any) -> None:
        if self.blank(value):
            value = "7bit"
        if not isinstance(value, str):
            self.fail(value, f"unsupported value {type(value).__name__}")
        encoding = unquote_string(value.strip()).lower()
        known = transfer.is_defined(encoding)
        if not known and not (encoding.startswith("x-") and TOKEN.match(encoding)):
            self.fail(value, f"unknown transfer encoding {encoding!r}")
        self.encoding = encoding

    def decoded(self) -> str:
        return self.encoding

    def render(self) -> str:
        return self.encoding


class MimeVersionField(StructuredField):
    """``major.minor``, comments allowed; a blank value means ``1.0``."""

    NAME = "mime-version"
    CAPITALIZED_FIELD = "MIME-Version"
    capabilities = ("major", "minor", "version")

    def parse(self, value: Any) -> None:
        if self.blank(value):
            value = "1.0"
        match = _VERSION.match(_COMMENT.sub("", str(value)).strip())
        if match is None:
            self.fail(value, "expected major.minor")
        self.major = int(match.group(1))
        self.minor = int(match.group(2))

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor}"

    def decoded(self) -> str:
        return self.version

    def render(self) -> str:
        return self.version


class ContentLocationField(StructuredField):
    """A URI, given as a token or a quoted string."""

    NAME = "content-location"
    CAPITALIZED_FIELD = "Content-Location"
    capabilities = ("location",)

    def parse(self, value: Any) -> None:
        if self.blank(value) or not isinstance(value, str):
            self.fail(value, "a location is required")
        location = unquote_string(value.strip())
        if not location or any(c.isspace() for c in location):
            self.fail(value, f"{location!r} is not a location")
        self.location = location

    def decoded(self) -> str:
        return self.location

    def render(self) -> str:
        if TOKEN_UNSAFE.search(self.location):
            return f'"{self.location}"'
        return self.location
