"""Block endpoint wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion ``/blocks`` endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def list_children(
        self,
        block_id: str,
        cursor: str | None = None,
        page_size: int = 100,
    ) -> dict[str, Any]:
        """Fetch one page of a block's children.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page).
        cursor:
            Continuation cursor from a previous call, or ``None`` for the
            first page.
        page_size:
            Number of children to request (at most 100).

        Returns
        -------
        dict
            The list response: ``results``, ``has_more`` and
            ``next_cursor``.
        """
        params: dict[str, Any] = {"page_size": page_size}
        if cursor is not None:
            params["start_cursor"] = cursor
        return await self._transport.request(
            "GET", f"/blocks/{block_id}/children", params=params
        )
