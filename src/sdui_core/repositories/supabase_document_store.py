"""
Supabase-backed document store.

Each screen document is one row of the config table:

    create table config (key text primary key, data jsonb not null);

Rows are read and written through the Supabase PostgREST client. The client
is synchronous, so every request runs in a worker thread.
"""

import asyncio
import json
import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from supabase import Client

from ..config import StoreConfig, get_config
from ..utils.database import get_db_client
from .base_repository import Document, DocumentStore, DocumentStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SupabaseDocumentStore(DocumentStore):
    """Document store over one Supabase table."""

    def __init__(self, client: Optional[Client] = None, store_config: Optional[StoreConfig] = None):
        store_config = store_config or get_config().store
        super().__init__(store_config.collection)
        self.key_column = store_config.key_column
        self.data_column = store_config.data_column
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_db_client().client
        return self._client

    def _table(self):
        return self.client.table(self.collection)

    async def _run(self, operation: str, key: Optional[str], request: Callable[[], T]) -> T:
        target = self.path(key) if key else self.collection
        try:
            return await asyncio.to_thread(request)
        except Exception as e:
            self._logger.error(f"Store {operation} failed for {target}: {e}")
            raise DocumentStoreError(f"{operation} failed for {target}: {e}") from e

    async def get(self, key: str) -> Optional[Document]:
        response = await self._run(
            "get",
            key,
            lambda: self._table()
            .select(self.data_column)
            .eq(self.key_column, key)
            .limit(1)
            .execute(),
        )
        rows = response.data or []
        if not rows:
            return None

        data: Any = rows[0].get(self.data_column)
        if isinstance(data, str):
            # jsonb columns stored as text by older seeding scripts
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise DocumentStoreError(f"Stored document {self.path(key)} is not JSON: {e}") from e
        return data

    async def put(self, key: str, document: Mapping[str, Any]) -> None:
        row = {self.key_column: key, self.data_column: dict(document)}
        await self._run("put", key, lambda: self._table().upsert(row).execute())

    async def delete(self, key: str) -> bool:
        response = await self._run(
            "delete",
            key,
            lambda: self._table().delete().eq(self.key_column, key).execute(),
        )
        return bool(response.data)

    async def list_keys(self) -> List[str]:
        response = await self._run(
            "list",
            None,
            lambda: self._table().select(self.key_column).execute(),
        )
        return [row[self.key_column] for row in (response.data or [])]
