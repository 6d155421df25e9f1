from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import Client


class SupabaseTable:
    """PostgREST plumbing shared by the Supabase repositories.

    supabase-py is synchronous, so every query runs in a worker thread.
    """

    TABLE_NAME: str

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    async def _rows(self, func: Callable[[], Any]) -> list[dict[str, Any]]:
        resp = await self._run(func)
        return list(resp.data or [])

    async def _delete_where(self, column: str, value: Any) -> int:
        rows = await self._rows(lambda: self._table().delete().eq(column, str(value)).execute())
        return len(rows)

    @staticmethod
    def _jsonable(changes: dict[str, Any]) -> dict[str, Any]:
        return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in changes.items()}
