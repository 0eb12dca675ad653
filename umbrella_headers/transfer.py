"""Content-Transfer-Encoding mechanisms, keyed by normalized name.

The header engine only needs to know which mechanisms exist (to validate
a Content-Transfer-Encoding field); the encode/decode pair is what body
assembly code looks up here.
"""

from __future__ import annotations

import base64
import binascii
import threading


class TransferEncoding:
    """Identity mechanism; subclasses override ``encode``/``decode``."""

    NAME = "binary"

    @staticmethod
    def encode(data: bytes) -> bytes:
        return data

    @staticmethod
    def decode(data: bytes) -> bytes:
        return data


class Binary(TransferEncoding):
    NAME = "binary"


class EightBit(TransferEncoding):
    NAME = "8bit"


class SevenBit(TransferEncoding):
    NAME = "7bit"


class QuotedPrintable(TransferEncoding):
    NAME = "quoted-printable"

    @staticmethod
    def encode(data: bytes) -> bytes:
        return binascii.b2a_qp(data)

    @staticmethod
    def decode(data: bytes) -> bytes:
        return binascii.a2b_qp(data)


class Base64(TransferEncoding):
    NAME = "base64"

    @staticmethod
    def encode(data: bytes) -> bytes:
        return base64.encodebytes(data)

    @staticmethod
    def decode(data: bytes) -> bytes:
        return base64.decodebytes(data)


_transfer_encodings: dict[str, type[TransferEncoding]] = {}
_lock = threading.Lock()


def get_name(name: str) -> str:
    """Normalize an encoding name: ``Quoted-Printable`` -> ``quoted_printable``."""
    return name.strip().replace("-", "_").lower()


def register(name: str, cls: type[TransferEncoding]) -> None:
    """Register a transfer encoding mechanism under *name*."""
    with _lock:
        _transfer_encodings[get_name(name)] = cls


def is_defined(name: str) -> bool:
    """Is the encoding we want defined?"""
    return get_name(name) in _transfer_encodings


def get_encoding(name: str) -> type[TransferEncoding] | None:
    return _transfer_encodings.get(get_name(name))


def get_all() -> list[type[TransferEncoding]]:
    return list(_transfer_encodings.values())


for _cls in (SevenBit, EightBit, Binary, QuotedPrintable, Base64):
    register(_cls.NAME, _cls)
