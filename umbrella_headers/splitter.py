"""Header line splitting, unfolding and folding.

RFC 2822 §2.2.3: a folded header is turned back into one logical line by
removing every CRLF that is immediately followed by whitespace.  Each
header is evaluated in its unfolded form.
"""

from __future__ import annotations

import re

from .errors import HeaderSplitError

# Field names are printable US-ASCII (33..126) except colon.
FIELD_SPLIT = re.compile(r"\A([\x21-\x39\x3b-\x7e]+)[ \t]*:[ \t]*(.*)\Z", re.DOTALL)
FIELD_PREFIX = re.compile(r"\A([^:]+)")

_FOLDING_WHITESPACE = re.compile(r"[\r\n \t]+")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

CRLF = "\r\n"


def unfold(text: str) -> str:
    """Collapse every run of CR, LF, space and tab into a single space."""
    return _FOLDING_WHITESPACE.sub(" ", text)


def split(raw: str) -> tuple[str, str]:
    """Split one unfolded header line into ``(name, value)``.

    Raises ``HeaderSplitError`` when the line has no valid field name
    followed by a colon.
    """
    match = FIELD_SPLIT.match(raw.strip())
    if match is None:
        raise HeaderSplitError(raw)
    return match.group(1).strip(), match.group(2).strip()


def field_prefix(raw: str) -> str:
    """Everything before the first colon, used as a best-effort name."""
    match = FIELD_PREFIX.match(raw)
    return match.group(1).strip() if match else raw.strip()


def split_header_block(text: str) -> list[str]:
    """Group the physical lines of a header block into logical header lines.

    A line starting with space or tab continues the previous header.  The
    first empty line ends the block.  Continuation lines keep their CRLF so
    the caller can still unfold them.
    """
    logical: list[str] = []
    for line in _LINE_BREAK.split(text):
        if line == "":
            break
        if line[0] in " \t" and logical:
            logical[-1] = f"{logical[-1]}{CRLF}{line}"
        else:
            logical.append(line)
    return logical


def fold(name: str, body: str, width: int = 78) -> str:
    """Render ``name: body`` folded at whitespace, CRLF terminated.

    Words longer than the line width are kept whole; only existing spaces
    become fold points, so ``unfold`` restores ``name: body`` exactly.
    """
    line = f"{name}: "
    lines: list[str] = []
    for i, word in enumerate(body.split(" ")):
        if i == 0:
            line += word
        elif len(line) + 1 + len(word) > width and line.strip():
            lines.append(line)
            line = f" {word}"
        else:
            line += f" {word}"
    lines.append(line)
    return CRLF.join(lines) + CRLF
