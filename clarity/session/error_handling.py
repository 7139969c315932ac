"""Error taxonomy and error reporting helpers for the search session.

Fetch failures are converted to a message exactly once, by
``describe_error``, and stored on the session state. Nothing raised by
the fetch client escapes the state machine.

Key Components:
- Exception classes for fetch and state errors
- Message conversion for the rendering layer
- Operation context tracking (duration + failure logging)
"""

import asyncio
import logging
import time
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ClarityError(Exception):
    """Base exception for client errors."""

    def __init__(self, message: str, **context):
        """Initialize error with context.

        Args:
            message: Human-readable error message
            **context: Additional context information
        """
        super().__init__(message)
        self.context = context
        self.timestamp = time.time()


class NetworkError(ClarityError):
    """Connectivity failure, timeout or server-side error from arXiv."""

    def __init__(self, message: str, status_code: Optional[int] = None, **context):
        """Initialize network error.

        Args:
            message: Error message
            status_code: HTTP status code if a response was received
            **context: Additional context
        """
        super().__init__(message, **context)
        self.status_code = status_code


class QueryError(ClarityError):
    """The query was malformed or rejected (e.g. an unknown category)."""

    def __init__(self, message: str, query: Optional[str] = None, **context):
        """Initialize query error.

        Args:
            message: Error message
            query: Rendered query string that was rejected
            **context: Additional context
        """
        super().__init__(message, **context)
        self.query = query


class StateTransitionError(ClarityError):
    """A state snapshot would break a session invariant."""

    pass


def describe_error(error: BaseException) -> str:
    """Convert an exception into the message shown to the user.

    Args:
        error: Exception raised by the fetch client

    Returns:
        The exception text, or the exception class name when it has none
    """
    message = str(error).strip()
    return message or type(error).__name__


class ErrorContext:
    """Context manager for tracking error information during execution.

    Usage:
        with ErrorContext("arxiv.search", token=3) as ctx:
            ctx.add_info("query", rendered)
            ...
    """

    def __init__(self, operation: str, **info: Any):
        """Initialize error context.

        Args:
            operation: Name of operation being performed
            **info: Initial contextual information
        """
        self.operation = operation
        self.info: dict[str, Any] = dict(info)
        self.start_time: Optional[float] = None
        self.duration: float = 0.0

    def __enter__(self):
        """Enter context, recording start time."""
        self.start_time = time.monotonic()
        logger.debug(f"Starting operation: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context, logging duration and any errors."""
        self.duration = time.monotonic() - self.start_time if self.start_time else 0.0

        if exc_type is not None and issubclass(exc_type, asyncio.CancelledError):
            logger.debug(f"Operation '{self.operation}' cancelled after {self.duration:.2f}s")
        elif exc_type is None:
            logger.debug(
                f"Operation '{self.operation}' completed successfully in {self.duration:.2f}s"
            )
        else:
            logger.warning(
                f"Operation '{self.operation}' failed after {self.duration:.2f}s: {exc_val}",
                extra={"extra_fields": {"operation": self.operation, **self.info}},
            )

        # Don't suppress the exception
        return False

    def add_info(self, key: str, value: Any):
        """Add contextual information.

        Args:
            key: Information key
            value: Information value
        """
        self.info[key] = value


__all__ = [
    "ClarityError",
    "NetworkError",
    "QueryError",
    "StateTransitionError",
    "describe_error",
    "ErrorContext",
]
