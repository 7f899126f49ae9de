"""
Structured logging for the blog API.

structlog renders both its own events and records from stdlib loggers (the
``file_logger(getLogger(__name__))`` module loggers) through one console handler:

- development: coloured `ConsoleRenderer` with rich tracebacks
- anything else: one JSON object per line

Every rendered event passes through `sanitize_event_dict`, which escapes control
characters (log injection), redacts credentials and e-mail addresses, and clips
oversized values such as full post bodies.

Examples
--------
>>> from app.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Blog created", slug="ai-basics")
"""

from logging import StreamHandler, root
from re import Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.processors import json as struct_json
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from app.configs.settings import settings
from app.utils.helpers import today_str

SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {"authorization", "proxy-authorization", "cookie", "x-api-key"},
)

PII_PATTERNS: list[tuple[Pattern, str]] = [
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
]

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})

MAX_VALUE_LENGTH = 1000


def sanitize_log_message(message: str) -> str:
    r"""
    Escape newlines and tabs, drop NUL bytes.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    """
    Replace credential-bearing header values.

    >>> sanitize_headers({"X-API-Key": "secret", "Content-Type": "json"})
    {'X-API-Key': '[REDACTED]', 'Content-Type': 'json'}
    """
    return {k: "[REDACTED]" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_pii(message: str) -> str:
    """
    Mask e-mail addresses.

    >>> redact_pii("Post by jane@example.com")
    'Post by [REDACTED_EMAIL]'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def clip(value: str, limit: int = MAX_VALUE_LENGTH) -> str:
    """Cut ``value`` to ``limit`` characters, noting how much was dropped."""
    if len(value) <= limit:
        return value
    return f"{value[:limit]}...[{len(value) - limit} more chars]"


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """
    Clean every value of an event before it is rendered.

    String values are escaped, redacted and clipped; a ``headers`` mapping has its
    credentials masked. Other values pass through untouched.
    """
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = clip(redact_pii(sanitize_log_message(value)))
        elif key.lower() == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)
    return event_dict


def get_renderer(*, colors: bool = True) -> Processor:
    """Console renderer in development, JSON lines everywhere else."""
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer(serializer=struct_json.dumps)


def configure_logging() -> None:
    """
    Route structlog and stdlib logging through a single sanitizing console handler.

    Safe to call more than once (uvicorn reload, tests): the root handlers are
    replaced, not appended to.
    """
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = StreamHandler()
    handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                sanitize_event_dict,
                get_renderer(colors=True),
            ],
            # applied to records that come from plain stdlib loggers
            foreign_pre_chain=[merge_contextvars, add_log_level, add_timestamp, ExtraAdder()],
        ),
    )
    root.addHandler(handler)


def get_logger(name: str) -> BoundLogger:
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Attach ``request_id`` to every event logged in the current context."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
