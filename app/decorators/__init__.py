from app.decorators.metrics import timed
from app.decorators.with_retry import RETRIABLE_EXCEPTIONS, with_retry

__all__ = [
    "timed",
    "with_retry",
    "RETRIABLE_EXCEPTIONS",
]
