"""Metrics hook protocol and its no-op default.

notionmark reports a handful of counters and timings.  Supply any object
satisfying :class:`MetricsHook` via ``NotionmarkConfig(metrics=...)`` to
forward them to StatsD, Prometheus or similar; otherwise
:class:`NoopMetricsHook` discards them.

Emitted metric names:

* ``notionmark.requests_total``            -- counter
* ``notionmark.retries_total``             -- counter
* ``notionmark.rate_limited_total``        -- counter
* ``notionmark.request_duration_ms``       -- timing
* ``notionmark.rate_limit_wait_ms``        -- timing
* ``notionmark.subpage_expansion_failures_total`` -- counter
* ``notionmark.page_export_duration_ms``   -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol every metrics backend must satisfy.

    *tags* are string key/value pairs; backends translate them into their
    own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment the counter *name* by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Metrics backend that drops every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
