"""Structured logging setup using structlog.

The header engine logs raw header text when it degrades a field (split
failures, grammar fallbacks, charset repair).  Received mail can carry
arbitrarily long header lines, so every string in an event dict is clipped
before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

DEFAULT_MAX_VALUE_LENGTH = 200


def clip_header_values(max_length: int = DEFAULT_MAX_VALUE_LENGTH) -> structlog.types.Processor:
    """Return a processor that shortens long string values in an event."""

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key, value in event_dict.items():
            if key == "event" or not isinstance(value, str):
                continue
            if len(value) > max_length:
                event_dict[key] = f"{value[:max_length]}...[{len(value) - max_length} more]"
        return event_dict

    return processor


def setup_logging(
    *,
    json: bool = True,
    level: str = "INFO",
    max_value_length: int = DEFAULT_MAX_VALUE_LENGTH,
) -> None:
    """Configure structlog for a process that parses mail headers.

    Parameters
    ----------
    json:
        If *True* (the default), output JSON lines.  If *False*, use a
        human-friendly console renderer.
    level:
        Root log level name (e.g. ``"DEBUG"``, ``"INFO"``).
    max_value_length:
        Longest string value (e.g. a raw header line) kept verbatim in an
        event before it is clipped.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        clip_header_values(max_value_length),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
