from app.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_http_exception_handler,
    create_unhandled_exception_handler,
)
from app.errors.database import (
    DatabaseError,
    DuplicateEntryError,
    OperationTimeoutError,
    RecordNotFoundError,
    StoreUnavailableError,
    database_exception_handler,
    translate_store_errors,
)
from app.errors.validation import ValidationError, format_errors, validation_exception_handler

__all__ = [
    "BaseAppError",
    "DatabaseError",
    "DuplicateEntryError",
    "OperationTimeoutError",
    "RecordNotFoundError",
    "StoreUnavailableError",
    "ValidationError",
    "create_exception_handler",
    "create_http_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "format_errors",
    "translate_store_errors",
    "validation_exception_handler",
]
