"""Free-text fields: Subject, Comments, Content-Description, Keywords."""

from __future__ import annotations

from typing import Any

from ..encodings import b_value_encode, value_decode
from .base import StructuredField, UnstructuredField


class SubjectField(UnstructuredField):
    NAME = "subject"
    CAPITALIZED_FIELD = "Subject"


class CommentsField(UnstructuredField):
    NAME = "comments"
    CAPITALIZED_FIELD = "Comments"


class ContentDescriptionField(UnstructuredField):
    NAME = "content-description"
    CAPITALIZED_FIELD = "Content-Description"


class KeywordsField(StructuredField):
    """Comma separated list of phrases."""

    NAME = "keywords"
    CAPITALIZED_FIELD = "Keywords"
    capabilities = ("keywords",)

    def parse(self, value: Any) -> None:
        if self.blank(value):
            self.keywords: list[str] = []
            return
        if isinstance(value, (list, tuple)):
            phrases = [str(v) for v in value]
        elif isinstance(value, str):
            phrases = value.split(",")
        else:
            self.fail(value, f"unsupported keywords value {type(value).__name__}")
        keywords = [value_decode(p.strip().strip('"')) for p in phrases]
        if any(not k for k in keywords):
            self.fail(value, "empty phrase in keyword list")
        self.keywords = keywords

    def decoded(self) -> str:
        return ", ".join(self.keywords)

    def render(self) -> str:
        return ", ".join(b_value_encode(k, self.charset) for k in self.keywords)
