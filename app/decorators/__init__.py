from app.decorators.with_retry import TRANSIENT_EXCEPTIONS, with_retry

__all__ = [
    "TRANSIENT_EXCEPTIONS",
    "with_retry",
]
