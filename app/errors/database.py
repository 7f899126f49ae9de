from collections.abc import Iterator
from contextlib import contextmanager
from logging import getLogger

from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    WaitQueueTimeoutError,
)
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_408_REQUEST_TIMEOUT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from app.configs import file_logger
from app.configs.settings import (
    DUPLICATE_MESSAGE,
    NOT_FOUND_MESSAGE,
    TIMEOUT_MESSAGE,
    UNAVAILABLE_MESSAGE,
)
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DuplicateEntryError(DatabaseError):
    """Exception raised when a write violates the unique slug index."""

    def __init__(
        self,
        detail: str = DUPLICATE_MESSAGE,
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is missing or its id is malformed."""

    def __init__(
        self,
        detail: str = NOT_FOUND_MESSAGE,
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class OperationTimeoutError(DatabaseError):
    """Exception raised when a store operation exceeds its time budget."""

    def __init__(
        self,
        detail: str = TIMEOUT_MESSAGE,
    ) -> None:
        super().__init__(detail, HTTP_408_REQUEST_TIMEOUT)


class StoreUnavailableError(DatabaseError):
    """Exception raised when the document store cannot be reached."""

    def __init__(
        self,
        detail: str = UNAVAILABLE_MESSAGE,
    ) -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Map PyMongo failures raised inside the block onto the application taxonomy.

    Args:
        operation: Short description used in log lines.

    Raises:
        DuplicateEntryError: Unique index violation.
        OperationTimeoutError: Server-side time limit or pool wait exceeded.
        StoreUnavailableError: Network or server-selection failure.
        DatabaseError: Any other driver error.
    """
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning(f"Duplicate key during {operation}: {e.details}")
        raise DuplicateEntryError from e
    except (ExecutionTimeout, WaitQueueTimeoutError, NetworkTimeout) as e:
        logger.warning(f"Timeout during {operation}: {e}")
        raise OperationTimeoutError from e
    except ConnectionFailure as e:
        logger.error(f"Store unavailable during {operation}: {e}")
        raise StoreUnavailableError from e
    except PyMongoError as e:
        logger.exception(f"Database error during {operation}")
        raise DatabaseError(detail=f"Error during {operation}: {e}") from e


database_exception_handler = create_exception_handler(logger)
