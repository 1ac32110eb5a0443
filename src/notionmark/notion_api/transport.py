"""Async HTTP transport for the Notion API.

Request lifecycle:

1. Acquire a token-bucket slot (await if needed).
2. Send the HTTP request with auth and version headers.
3. On ``2xx`` -- return the parsed JSON response.
4. On ``429`` -- honour ``Retry-After``, sleep, and retry.
5. On ``5xx`` / network error -- exponential backoff and retry.
6. On non-retryable ``4xx`` -- raise the matching typed error immediately.
7. On max attempts exceeded -- raise :class:`NotionmarkRateLimitError` if
   the last answer was ``429``, else :class:`NotionmarkRetryExhaustedError`.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from notionmark.config import NotionmarkConfig
from notionmark.errors import (
    NotionmarkAuthError,
    NotionmarkNetworkError,
    NotionmarkNotFoundError,
    NotionmarkPermissionError,
    NotionmarkRateLimitError,
    NotionmarkRetryExhaustedError,
    NotionmarkValidationError,
)
from notionmark.observability import NoopMetricsHook, get_logger

from .rate_limit import AsyncTokenBucket
from .retries import RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("notionmark.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a 4xx response that must not be retried."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message", response.text[:500])
    notion_code = body.get("code", "")
    context: dict[str, Any] = {"status_code": status, "notion_code": notion_code}

    if status == 401:
        raise NotionmarkAuthError(
            message=f"Authentication failed on {method} {path}: {notion_message}",
            context=context,
        )
    if status == 403:
        raise NotionmarkPermissionError(
            message=f"Permission denied on {method} {path}: {notion_message}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise NotionmarkNotFoundError(
            message=f"Resource not found on {method} {path}: {notion_message}",
            context={**context, "path": path},
        )
    if status == 429:
        raise NotionmarkRateLimitError(
            message=f"Rate limited on {method} {path}: {notion_message}",
            context={**context, "retry_after_seconds": _parse_retry_after(response)},
        )

    label = "Validation error" if status == 400 else f"Client error {status}"
    raise NotionmarkValidationError(
        message=f"{label} on {method} {path}: {notion_message}",
        context={**context, "body": body},
    )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`NotionmarkConfig` controlling all transport behaviour.
    client:
        Optional pre-built ``httpx.AsyncClient``; tests pass one backed by
        ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: NotionmarkConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ...).
        path:
            API path relative to ``base_url`` (e.g. ``/pages/<id>``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``, ``headers=``).

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for empty responses).

        Raises
        ------
        NotionmarkAuthError
            On 401 responses.
        NotionmarkPermissionError
            On 403 responses.
        NotionmarkNotFoundError
            On 404 responses.
        NotionmarkValidationError
            On 400 and other non-retryable 4xx responses.
        NotionmarkRateLimitError
            When every attempt was answered with 429.
        NotionmarkRetryExhaustedError
            When all attempts failed with 5xx responses.
        NotionmarkNetworkError
            When the last attempt failed at the transport level.
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None
        last_retry_after: float | None = None

        for attempt in range(max_attempts):
            wait = await self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "notionmark.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_status = None
                await asyncio.sleep(self._network_backoff(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            tags = {"method": method, "path": path, "status": str(last_status)}
            self._metrics.increment("notionmark.requests_total", tags=tags)
            self._metrics.timing("notionmark.request_duration_ms", elapsed_ms, tags=tags)

            if 200 <= last_status < 300:
                if last_status == 204 or not response.content:
                    return {}
                result: dict = response.json()
                return result

            if last_status not in RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)

            retry_after: float | None = None
            reason = "server_error"
            if last_status == 429:
                retry_after = _parse_retry_after(response)
                last_retry_after = retry_after
                reason = "rate_limited"
                self._metrics.increment(
                    "notionmark.rate_limited_total",
                    tags={"method": method, "path": path},
                )
                log.warning(
                    "Rate limited by Notion API",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "path": path,
                            "retry_after": retry_after,
                            "attempt": attempt + 1,
                        }
                    },
                )

            if not should_retry(last_status, None, attempt, max_attempts):
                break

            delay = compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            )
            self._metrics.increment(
                "notionmark.retries_total",
                tags={"method": method, "path": path, "reason": reason},
            )
            await asyncio.sleep(delay)

        ctx: dict[str, Any] = {"attempts": max_attempts, "last_status_code": last_status}
        if last_status == 429:
            raise NotionmarkRateLimitError(
                message=f"Notion API rate limit exceeded on {method} {path}",
                context={**ctx, "retry_after_seconds": last_retry_after},
            )
        raise NotionmarkRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} {path} "
                f"(last status: {last_status})"
            ),
            context=ctx,
        )

    def _network_backoff(
        self,
        method: str,
        path: str,
        exc: Exception,
        attempt: int,
    ) -> float:
        """Return the retry delay after a network error, or raise when done."""
        self._metrics.increment(
            "notionmark.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if should_retry(None, exc, attempt, self._config.retry_max_attempts):
            self._metrics.increment(
                "notionmark.retries_total",
                tags={"method": method, "path": path, "reason": "network_error"},
            )
            return compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
            )
        raise NotionmarkNetworkError(
            message=f"Network error on {method} {path}: {exc}",
            context={"url": path, "attempt": attempt + 1},
            cause=exc,
        ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
