"""MIME parameter lists (``; key=value; key*=charset'lang'value``).

Handles quoted strings, RFC 2231 extended values and continuations
(``name*0*=``, ``name*1=``), and RFC 2047 encoded words that non-compliant
senders put inside quoted parameter values.
"""

from __future__ import annotations

import re

from ..encodings import is_ascii, param_decode, param_decode_extended, param_encode, value_decode

TOKEN = re.compile(r"\A[!#$%&'*+\-.0-9A-Z^_`a-z{|}~]+\Z")
_SECTION = re.compile(r"\A(?P<name>[^*]+)(?:\*(?P<number>\d+))?(?P<extended>\*)?\Z")


def split_outside_quotes(text: str, separator: str = ";") -> list[str]:
    """Split *text* on *separator*, ignoring separators inside quoted strings."""
    parts: list[str] = []
    current: list[str] = []
    quoted = escaped = False
    for char in text:
        if escaped:
            escaped = False
        elif char == "\\" and quoted:
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == separator and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def unquote_string(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return re.sub(r"\\(.)", r"\1", text[1:-1])
    return text


class ParameterList(dict):
    """Case-insensitive (lower-cased) parameter name to decoded value."""

    @classmethod
    def parse(cls, text: str) -> ParameterList:
        """Parse ``key=value`` pairs separated by ``;``.

        Raises ``ValueError`` on a pair without ``=`` or with a bad name.
        """
        sections: dict[str, list[tuple[int, bool, str]]] = {}
        for part in split_outside_quotes(text):
            part = part.strip()
            if not part:
                continue
            key, sep, raw = part.partition("=")
            key = key.strip().lower()
            if not sep or not TOKEN.match(key):
                raise ValueError(f"malformed parameter {part!r}")
            match = _SECTION.match(key)
            if match is None:
                raise ValueError(f"malformed parameter name {key!r}")
            number = int(match.group("number") or 0)
            sections.setdefault(match.group("name"), []).append(
                (number, bool(match.group("extended")), raw.strip())
            )

        params = cls()
        for name, pieces in sections.items():
            params[name] = cls._join_sections(sorted(pieces, key=lambda p: p[0]))
        return params

    @staticmethod
    def _join_sections(pieces: list[tuple[int, bool, str]]) -> str:
        charset = "us-ascii"
        decoded: list[str] = []
        for i, (_, extended, raw) in enumerate(pieces):
            if extended and i == 0:
                if raw.count("'") >= 2:
                    charset = raw.split("'", 1)[0] or charset
                decoded.append(param_decode_extended(unquote_string(raw)))
            elif extended:
                decoded.append(param_decode(unquote_string(raw), charset))
            else:
                decoded.append(unquote_string(raw))
        return value_decode("".join(decoded))

    def render(self, charset: str | None = None) -> str:
        """Wire form: extended ``key*=`` for non-ASCII values."""
        rendered = []
        for key, value in self.items():
            if is_ascii(value):
                rendered.append(f"{key}={param_encode(value)}")
            else:
                rendered.append(f"{key}*={param_encode(value, charset)}")
        return "; ".join(rendered)

    def decoded(self) -> str:
        rendered = []
        for key, value in self.items():
            if TOKEN.match(value) and "'" not in value:
                rendered.append(f"{key}={value}")
            else:
                escaped = value.replace("\\", "\\\\").replace('"', '\\"')
                rendered.append(f'{key}="{escaped}"')
        return "; ".join(rendered)
