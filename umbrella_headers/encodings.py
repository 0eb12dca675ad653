"""RFC 2047 encoded words and RFC 2231 parameter values.

An encoded word looks like this::

    =?charset?cte?encoded_string?=

``cte`` is ``Q`` (quoted printable, ``_`` standing for space) or ``B``
(base64), ignoring case.  Decoding never raises: anything that does not
decode cleanly is passed through as literal text.  Encoding only ever
produces ``B`` words unless ``q_value_encode`` is asked for explicitly.
"""

from __future__ import annotations

import base64
import binascii
import codecs
import re
from dataclasses import dataclass
from urllib.parse import quote, unquote

import structlog

from .config import get_settings

logger = structlog.get_logger()

ENCODED_VALUE = re.compile(r"=\?([^?\s]+)\?([^?\s]+)\?([^?]*?)\?=")
TOKEN_UNSAFE = re.compile(r'[()<>@,;:\\"/\[\]?=\x00-\x20\x7f]')
Q_VALUES = ("q",)
B_VALUES = ("b",)

_WHITESPACE = re.compile(r"\s+")
_QUOTED_NON_ASCII = re.compile(r'(".*?[^\x00-\x7f].*?")')
_Q_BYTE = re.compile(rb"=([a-fA-F0-9]{2})")
_SOFT_LINE_BREAK = re.compile(r"=\r?\n")

# codecs that prepend a byte-order mark, mapped to the label of their BOM-free form
_BOM_FREE_LABELS = {"utf-16": "UTF-16LE", "utf-32": "UTF-32LE", "utf-8-sig": "UTF-8"}


def is_ascii(text: str) -> bool:
    return text.isascii()


@dataclass
class Segment:
    """A run of header text: either literal or a single encoded word."""

    text: str
    charset: str | None = None
    encoding: str | None = None
    payload: str | None = None

    @property
    def is_encoded(self) -> bool:
        return self.encoding is not None

    def joins(self, other: Segment) -> bool:
        """True when *other* continues the same encoded run as this segment."""
        return (
            self.is_encoded
            and other.is_encoded
            and self.encoding == other.encoding
            and _normalize_charset(self.charset) == _normalize_charset(other.charset)
        )


def _normalize_charset(charset: str | None) -> str:
    # RFC 2231 allows a language suffix: =?utf-8*en?Q?...?=
    return (charset or "").split("*", 1)[0].lower()


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def collapse_adjacent_encodings(text: str) -> list[Segment]:
    """Scan *text* into literal and encoded-word segments.

    Whitespace that only separates two encoded words is dropped, so runs of
    encoded words folded across lines come out adjacent to each other.
    Encoded words with a discriminator other than Q or B are kept as literal
    text.
    """
    segments: list[Segment] = []
    pos = 0
    for match in ENCODED_VALUE.finditer(text):
        charset, cte, payload = match.groups()
        cte = cte.lower()
        gap = text[pos:match.start()]
        previous_encoded = bool(segments) and segments[-1].is_encoded
        if gap and not (previous_encoded and gap.isspace() and cte in Q_VALUES + B_VALUES):
            segments.append(Segment(gap))
        if cte in Q_VALUES + B_VALUES:
            segments.append(Segment(match.group(0), charset, cte, payload))
        else:
            segments.append(Segment(match.group(0)))
        pos = match.end()
    if pos < len(text):
        segments.append(Segment(text[pos:]))
    return segments


def decode_q(payload: str) -> bytes:
    """Undo the Q transfer encoding of an encoded-word payload."""
    encoded = payload.encode("utf-8").replace(b"_", b" ")
    return _Q_BYTE.sub(lambda m: bytes([int(m.group(1), 16)]), encoded)


def decode_b(payload: str) -> bytes:
    """Undo the B transfer encoding, repairing missing padding.

    Raises ``binascii.Error`` when the payload is not base64 at all.
    """
    encoded = payload.encode("ascii", "replace")
    pad_err = len(encoded) % 4
    if pad_err:
        encoded += b"==="[: 4 - pad_err]
    try:
        return base64.b64decode(encoded, validate=True)
    except binascii.Error:
        stripped = encoded.rstrip(b"=")
        for i in 0, 1, 2, 3:
            try:
                return base64.b64decode(stripped + b"=" * i, validate=False)
            except binascii.Error:
                continue
        raise


_TRANSFER_DECODERS = {"q": decode_q, "b": decode_b}


def _decode_run(run: list[Segment]) -> str:
    """Decode consecutive encoded words sharing charset and discriminator."""
    decoder = _TRANSFER_DECODERS[run[0].encoding]
    try:
        data = b"".join(decoder(segment.payload or "") for segment in run)
        return data.decode(_normalize_charset(run[0].charset), "replace")
    except (binascii.Error, LookupError, ValueError):
        logger.debug("encoded_word_passthrough", charset=run[0].charset, encoding=run[0].encoding)
        return "".join(segment.text for segment in run)


def value_decode(text: str) -> str:
    """Decode every encoded word in *text*, leaving literal text alone."""
    if not ENCODED_VALUE.search(text):
        return text

    output: list[str] = []
    run: list[Segment] = []
    for segment in collapse_adjacent_encodings(text):
        if run and not run[-1].joins(segment):
            output.append(_decode_run(run))
            run = []
        if segment.is_encoded:
            run.append(segment)
        else:
            output.append(segment.text)
    if run:
        output.append(_decode_run(run))
    return "".join(output)


decode = value_decode


def split_encoding_from_string(text: str) -> str | None:
    """Charset of the first encoded word in *text*, if any."""
    match = ENCODED_VALUE.search(text)
    return match.group(1) if match else None


def split_value_encoding_from_string(text: str) -> str | None:
    """Discriminator (``Q`` or ``B``) of the first encoded word, if any."""
    match = ENCODED_VALUE.search(text)
    return match.group(2).upper() if match else None


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def _pick_charset(text: str, charset: str | None) -> str:
    """Pick the charset label to write, falling back to UTF-8 if it cannot carry *text*.

    Codecs that write a byte-order mark are swapped for their BOM-free form,
    otherwise every chunk would start with its own mark.
    """
    label = charset or get_settings().default_charset
    try:
        codec = codecs.lookup(label).name
        text.encode(label)
    except (LookupError, UnicodeEncodeError):
        logger.debug("encode_charset_fallback", charset=label)
        return "UTF-8"
    return _BOM_FREE_LABELS.get(codec, label)


def _encode_text(text: str, codec: str) -> bytes:
    """Encode *text*, restoring surrogate-escaped raw bytes; never raises."""
    try:
        return text.encode(codec, "surrogateescape")
    except UnicodeEncodeError:
        return text.encode(codec, "replace")


def _chunk(text: str, codec: str, fits) -> list[str]:
    """Split *text* on character boundaries into pieces that *fits* accepts."""
    chunks: list[str] = []
    current = ""
    for char in text:
        candidate = current + char
        if current and not fits(_encode_text(candidate, codec)):
            chunks.append(current)
            current = char
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def b_value_encode(text: str, charset: str | None = None) -> str:
    """Base64 encode *text* as one or more encoded words.

    ASCII text is returned untouched.  Words are joined with a single space
    and each stays within ``max_encoded_word_length`` characters.

    >>> b_value_encode("This is あ string", "UTF-8")
    '=?UTF-8?B?VGhpcyBpcyDjgYIgc3RyaW5n?='
    """
    if text is None or is_ascii(str(text)):
        return text
    label = _pick_charset(text, charset)
    room = get_settings().max_encoded_word_length - len(label) - 7
    max_bytes = max(room // 4, 1) * 3
    chunks = _chunk(text, label, lambda data: len(data) <= max_bytes)
    return " ".join(
        f"=?{label}?B?{base64.b64encode(_encode_text(chunk, label)).decode('ascii')}?="
        for chunk in chunks
    )


def _q_encode_bytes(data: bytes) -> str:
    encoded = binascii.b2a_qp(data, header=True).decode("ascii")
    encoded = _SOFT_LINE_BREAK.sub("", encoded)
    return (
        encoded.replace("?", "=3F")
        .replace("\t", "=09")
        .replace("\r", "=0D")
        .replace("\n", "=0A")
    )


def q_value_encode(text: str, charset: str | None = None) -> str:
    """Quoted-printable encode *text* as one or more encoded words.

    >>> q_value_encode("This is あ string", "UTF-8")
    '=?UTF-8?Q?This_is_=E3=81=82_string?='
    """
    if text is None or is_ascii(str(text)):
        return text
    label = _pick_charset(text, charset)
    room = get_settings().max_encoded_word_length - len(label) - 7
    chunks = _chunk(text, label, lambda data: len(_q_encode_bytes(data)) <= room)
    return " ".join(f"=?{label}?Q?{_q_encode_bytes(_encode_text(chunk, label))}?=" for chunk in chunks)


def encode(text: str, charset: str | None = None) -> str:
    """Encode *text* for a header; only base64 words are produced."""
    return b_value_encode(text, charset)


def decode_encode(text: str, output_type: str) -> str:
    """Decode *text* when *output_type* is ``"decode"``, otherwise encode it."""
    if output_type == "decode":
        return value_decode(text)
    return b_value_encode(text)


# ----------------------------------------------------------------------
# Parameters (RFC 2231)
# ----------------------------------------------------------------------


def param_encode(value: str, charset: str | None = None, language: str | None = None) -> str:
    """Encode a parameter value for use after ``name*=``/``name=``.

    >>> param_encode("This is fun")
    '"This is fun"'
    >>> param_encode("résumé.pdf")
    "utf-8'en'r%C3%A9sum%C3%A9.pdf"
    """
    if not value:
        return '""'
    if is_ascii(value):
        if TOKEN_UNSAFE.search(value):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return value
    settings = get_settings()
    charset = charset or settings.default_charset
    language = settings.param_encode_language if language is None else language
    try:
        data = value.encode(charset)
    except (LookupError, UnicodeEncodeError):
        charset = "utf-8"
        data = _encode_text(value, charset)
    return f"{charset}'{language}'{quote(data, safe='')}"


def param_decode(value: str, charset: str) -> str:
    """Percent-decode *value* whose bytes are in *charset*."""
    try:
        return unquote(value, encoding=charset, errors="replace")
    except LookupError:
        return unquote(value, errors="replace")


def param_decode_extended(value: str) -> str:
    """Decode a ``charset'language'value`` extended parameter value."""
    parts = value.split("'", 2)
    if len(parts) != 3:
        return param_decode(value, "us-ascii")
    charset, _language, encoded = parts
    return param_decode(encoded, charset or "us-ascii")


# ----------------------------------------------------------------------
# Addresses
# ----------------------------------------------------------------------


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return text


def encode_non_usascii(address: str, charset: str | None) -> str:
    """Encode the non-ASCII words of one address, leaving the rest as is."""
    if is_ascii(address) or charset is None:
        return address
    address = _QUOTED_NON_ASCII.sub(lambda m: b_value_encode(_unquote(m.group(0)), charset), address)
    tokens = _WHITESPACE.split(address)
    words: list[str] = []
    for i, word in enumerate(tokens):
        if is_ascii(word):
            words.append(word)
            continue
        if i > 0 and not is_ascii(tokens[i - 1]):
            # whitespace between two encoded words is dropped when decoding
            word = f" {word}"
        words.append(b_value_encode(word, charset))
    return " ".join(words)


def address_encode(address: str | list[str | None] | None, charset: str | None = "utf-8") -> str | None:
    """Encode an address or list of addresses for an address-bearing header."""
    if isinstance(address, (list, tuple)):
        return ", ".join(address_encode(a, charset) for a in address if a is not None)
    if address is None:
        return None
    return encode_non_usascii(address, charset)
