"""Database endpoint wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion ``/databases`` endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, database_id: str) -> dict[str, Any]:
        """Retrieve a database object (title, icon, schema) by its ID."""
        return await self._transport.request("GET", f"/databases/{database_id}")

    async def query(
        self,
        database_id: str,
        cursor: str | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        """Fetch one page of rows from a database.

        Parameters
        ----------
        database_id:
            The UUID of the database.
        cursor:
            Continuation cursor from a previous call, or ``None``.
        page_size:
            Number of rows to request (at most 100).

        Returns
        -------
        dict
            The query response: ``results``, ``has_more`` and
            ``next_cursor``.
        """
        body: dict[str, Any] = {"page_size": page_size}
        if cursor is not None:
            body["start_cursor"] = cursor
        return await self._transport.request(
            "POST", f"/databases/{database_id}/query", json=body
        )
