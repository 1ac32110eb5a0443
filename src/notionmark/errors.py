"""Error hierarchy for notionmark.

Every public error class inherits from :class:`NotionmarkError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Failures that reach the caller are always one of the classified subclasses
below; failures while expanding an optional sub-page are absorbed by the
fetcher and never surface here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_LOCATOR = "INVALID_LOCATOR"
    FETCH_ERROR = "FETCH_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionmarkError(Exception):
    """Base exception for all notionmark errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class _CodedError(NotionmarkError):
    """Shared constructor for subclasses bound to a single error code."""

    error_code: ErrorCode = ErrorCode.FETCH_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self.error_code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class NotionmarkValidationError(_CodedError):
    """Notion API returned 400 (or another non-retryable 4xx).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    error_code = ErrorCode.VALIDATION_ERROR


class NotionmarkAuthError(_CodedError):
    """Notion API returned 401: the integration token is invalid or expired."""

    error_code = ErrorCode.AUTH_ERROR


class NotionmarkPermissionError(_CodedError):
    """Notion API returned 403: the integration lacks access to the resource.

    Context keys: ``operation``.
    """

    error_code = ErrorCode.PERMISSION_ERROR


class NotionmarkNotFoundError(_CodedError):
    """Notion API returned 404: the requested resource does not exist.

    Context keys: ``path``.
    """

    error_code = ErrorCode.NOT_FOUND


class NotionmarkRateLimitError(_CodedError):
    """Notion API kept answering 429 until the retry budget ran out.

    Context keys: ``attempts``, ``retry_after_seconds``.
    """

    error_code = ErrorCode.RATE_LIMITED


class NotionmarkRetryExhaustedError(_CodedError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    error_code = ErrorCode.RETRY_EXHAUSTED


class NotionmarkNetworkError(_CodedError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    error_code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Locator / fetch errors
# ---------------------------------------------------------------------------

class NotionmarkInvalidLocatorError(_CodedError):
    """A locator did not contain a recognisable page or database id.

    Context keys: ``locator``.
    """

    error_code = ErrorCode.INVALID_LOCATOR


class NotionmarkFetchError(_CodedError):
    """Any other failure while resolving a primary page or database.

    Context keys: ``locator``.
    """

    error_code = ErrorCode.FETCH_ERROR
