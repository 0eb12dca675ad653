"""Repair of header values carrying raw 8-bit bytes.

Non-compliant senders routinely ship filenames as raw Latin-1, CP1252 or
Shift-JIS bytes.  Before a stricter grammar rejects such a header, the
offending parameter is transcoded to UTF-8 (guessing the source charset)
and rewritten in a wire-safe form.

Header text read from bytes is expected to be decoded as UTF-8 with
``surrogateescape`` so the original bytes survive until they reach this
module.
"""

from __future__ import annotations

import codecs
import re
import threading

import charset_normalizer
import structlog

from .config import get_settings
from .encodings import b_value_encode, param_encode

logger = structlog.get_logger()

REPLACE_ERRORS = "umbrella_headers.replace"

_NAME_PARAM = re.compile(r"^\s*(file)?name\s*=\s*", re.IGNORECASE)
_FILENAME_PARAM = re.compile(r"\bfilename\s*=\s*", re.IGNORECASE)


def _replace_with_placeholder(error: UnicodeError) -> tuple[str, int]:
    return get_settings().replacement_char, error.end


codecs.register_error(REPLACE_ERRORS, _replace_with_placeholder)


class CharsetDetector:
    """Statistical charset detection over raw bytes, backed by charset_normalizer."""

    def __init__(self, default: str = "utf-8") -> None:
        self.default = default

    def detect(self, raw: bytes) -> str:
        """Best-guess Python codec name for *raw*; never fails."""
        if not raw:
            return self.default
        best = charset_normalizer.from_bytes(raw).best()
        if best is None:
            return self.default
        return best.encoding


_detector: CharsetDetector | None = None
_detector_lock = threading.Lock()


def get_detector() -> CharsetDetector:
    """Return the process-wide detector, creating it exactly once."""
    global _detector
    if _detector is None:
        with _detector_lock:
            if _detector is None:
                _detector = CharsetDetector(default=get_settings().fallback_encoding)
    return _detector


def to_bytes(value: str | bytes) -> bytes:
    """Recover the raw bytes behind a (possibly surrogate-escaped) string."""
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8", "surrogateescape")


def double_encode(raw: bytes, encoding: str = "utf-8", errors: str = "strict") -> str:
    """Decode *raw*, then push it through UTF-16LE and back.

    The UTF-16LE leg forces a real conversion even when *raw* is already in
    the target encoding, so strict mode fails on any invalid sequence.
    """
    text = raw.decode(encoding, errors)
    return text.encode("utf-16-le", errors).decode("utf-16-le", errors)


def string_is_valid(value: str | bytes) -> bool:
    try:
        double_encode(to_bytes(value))
    except (UnicodeDecodeError, UnicodeEncodeError):
        return False
    return True


def detect_encoding(value: str | bytes) -> str:
    """Detected charset of the whole of *value*, guaranteed to be a known codec."""
    encoding = get_detector().detect(to_bytes(value))
    try:
        codecs.lookup(encoding)
    except LookupError:
        logger.warning("charset_detection_unusable", encoding=encoding)
        return get_settings().fallback_encoding
    return encoding


def process_unsafe_string(value: str | bytes, encoding: str | None = None) -> str:
    """Transcode *value* from *encoding* to text, lossily.

    The encoding is detected from *value* itself when not given.  Callers
    repairing one parameter of a header pass the encoding detected over the
    whole header, since short fragments give unreliable guesses.
    """
    raw = to_bytes(value)
    if encoding is None:
        encoding = detect_encoding(raw)
    try:
        return double_encode(raw, encoding, REPLACE_ERRORS)
    except LookupError:
        logger.warning("charset_detection_unusable", encoding=encoding)
        return double_encode(raw, get_settings().fallback_encoding, REPLACE_ERRORS)


def _strip_quotes(text: str) -> str:
    text = text.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def _split_filename(rest: str) -> tuple[str, str]:
    """Split the text after ``filename=`` into the value and what follows it."""
    rest = rest.lstrip()
    if rest.startswith('"'):
        end = rest.find('"', 1)
        if end != -1:
            return rest[: end + 1], rest[end + 1 :]
        return rest, ""
    end = rest.find(";")
    if end == -1:
        return rest, ""
    return rest[:end], rest[end:]


def repair_content_disposition(value: str) -> str:
    """Rewrite a raw 8-bit ``filename=`` as an RFC 2231 ``filename*=`` parameter.

    An invalid value without a filename parameter is transcoded as a whole.
    """
    if string_is_valid(value):
        return value

    encoding = detect_encoding(value)
    match = _FILENAME_PARAM.search(value)
    if match is None:
        logger.info("header_value_transcoded", name="Content-Disposition", encoding=encoding)
        return process_unsafe_string(value, encoding)

    head, rest = value[: match.start()], value[match.end() :]
    raw_filename, tail = _split_filename(rest)
    filename = _strip_quotes(process_unsafe_string(raw_filename, encoding))
    # an all-ASCII repair result has no charset to declare
    key = "filename=" if filename.isascii() else "filename*="
    repaired = (
        f"{process_unsafe_string(head, encoding)}{key}{param_encode(filename)}"
        f"{process_unsafe_string(tail, encoding)}"
    )
    logger.info("content_disposition_repaired", filename=filename, encoding=encoding)
    return repaired.encode("ascii", REPLACE_ERRORS).decode("ascii")


def repair_content_type(value: str) -> str:
    """B-encode every raw 8-bit ``name=``/``filename=`` parameter.

    Other parameters are transcoded to text.
    """
    if string_is_valid(value):
        return value

    encoding = detect_encoding(value)
    parts = [part.strip() for part in value.split(";")]
    for idx, part in enumerate(parts):
        key = part.split("=", 1)[0].strip()
        if key.lower() not in ("filename", "name"):
            parts[idx] = process_unsafe_string(part, encoding)
            continue
        raw_filename = _NAME_PARAM.sub("", part, count=1)
        filename = _strip_quotes(process_unsafe_string(raw_filename, encoding))
        parts[idx] = f'{key}="{b_value_encode(filename, "UTF-8")}"'
        logger.info("content_type_repaired", parameter=key, filename=filename, encoding=encoding)
    return "; ".join(parts)


def repair_value(name: str, value: str) -> str:
    """Repair *value* of header *name* before it is handed to a grammar.

    Content-Type and Content-Disposition get their filename parameters
    rewritten; any other header carrying invalid bytes is transcoded from
    its detected charset.
    """
    lower = name.lower()
    if lower == "content-disposition":
        return repair_content_disposition(value)
    if lower == "content-type":
        return repair_content_type(value)
    if string_is_valid(value):
        return value
    logger.info("header_value_transcoded", name=name)
    return process_unsafe_string(value)
