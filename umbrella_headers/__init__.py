"""Umbrella header engine — typed RFC 2822/2045 header fields.

Public API re-exported here for convenience::

    from umbrella_headers import Field, Header
"""

from .config import HeaderSettings, get_settings
from .encodings import (
    address_encode,
    b_value_encode,
    decode,
    encode,
    param_decode,
    param_decode_extended,
    param_encode,
    q_value_encode,
    value_decode,
)
from .errors import FieldError, FieldParseError, FieldSyntaxError, HeaderSplitError
from .field import Field, FieldState
from .header import Header
from .logging import setup_logging
from .models import FieldDiagnostic
from .registry import FIELD_ORDER, FieldRegistry, create_field, default_registry
from .repair import get_detector, repair_value
from .splitter import fold, split, unfold

__all__ = [
    "FIELD_ORDER",
    "Field",
    "FieldDiagnostic",
    "FieldError",
    "FieldParseError",
    "FieldRegistry",
    "FieldState",
    "FieldSyntaxError",
    "Header",
    "HeaderSettings",
    "HeaderSplitError",
    "address_encode",
    "b_value_encode",
    "create_field",
    "decode",
    "default_registry",
    "encode",
    "fold",
    "get_detector",
    "get_settings",
    "param_decode",
    "param_decode_extended",
    "param_encode",
    "q_value_encode",
    "repair_value",
    "setup_logging",
    "split",
    "unfold",
    "value_decode",
]
