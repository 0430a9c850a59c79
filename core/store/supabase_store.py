# =============================================================================
# core/store/supabase_store.py - Supabase (PostgREST) Row Store
# =============================================================================
# RowStore backed by the Supabase REST API. Column defaults, keys and
# foreign-key actions come from Postgres itself (supabase/schema.sql).
# =============================================================================

import logging
from typing import Any

import httpx

from core.store.base import Row, RowStore, RowStoreError, StoreUnavailableError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_id

logger = logging.getLogger(__name__)


class SupabaseRowStore(RowStore):
    """
    RowStore over supabase-py's query builder.

    Uses the shared service-role client, so the database does not filter
    rows on its own; the gateway does that before anything is returned.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def _execute(self, query, table: str, action: str):
        try:
            return query.execute()
        except httpx.HTTPError as e:
            logger.error(f"Supabase unreachable during {action} on {table}: {e}")
            raise StoreUnavailableError(
                f"Could not reach Supabase: {e}",
                details={"table": table, "action": action},
            ) from e
        except Exception as e:
            logger.error(f"Supabase {action} on {table} failed: {e}")
            raise RowStoreError(
                f"Supabase {action} on {table} failed: {e}",
                details={"table": table, "action": action},
            ) from e

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        query = self.client.table(table).select("*")
        for column, value in (filters or {}).items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, normalize_id(value) if column == "id" or column.endswith("_id") else value)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)

        response = self._execute(query, table, "select")
        return response.data or []

    def insert(self, table: str, row: Row) -> Row:
        response = self._execute(self.client.table(table).insert(row), table, "insert")
        if not response.data:
            raise RowStoreError(f"Insert into {table} returned no data", details={"table": table})
        logger.info(f"Inserted {table} row {response.data[0].get('id')}")
        return response.data[0]

    def update(self, table: str, row_id: Any, changes: Row) -> Row | None:
        query = self.client.table(table).update(changes).eq("id", normalize_id(row_id))
        response = self._execute(query, table, "update")
        return response.data[0] if response.data else None

    def delete(self, table: str, row_id: Any) -> bool:
        query = self.client.table(table).delete().eq("id", normalize_id(row_id))
        response = self._execute(query, table, "delete")
        return bool(response.data)

    def upsert(self, table: str, row: Row) -> Row:
        query = self.client.table(table).upsert(row, on_conflict="id")
        response = self._execute(query, table, "upsert")
        if not response.data:
            raise RowStoreError(f"Upsert into {table} returned no data", details={"table": table})
        return response.data[0]
