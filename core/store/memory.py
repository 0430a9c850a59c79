# =============================================================================
# core/store/memory.py - In-Process Row Store
# =============================================================================
# A dict-backed RowStore for local development (DATA_BACKEND=memory) and the
# test suite. It follows core.store.schema the way Postgres follows
# supabase/schema.sql: defaults, generated keys, created_at, foreign-key
# existence on write and ON DELETE actions.
# =============================================================================

import copy
import itertools
import logging
import threading
import uuid
from typing import Any

from core.store.base import Row, RowStore, RowStoreError
from core.store.schema import TABLES, KeyKind, OnDelete, TableSchema, referencing
from lib.utils import normalize_id, utc_now_iso

logger = logging.getLogger(__name__)


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs sort last, like Postgres ascending order
    return (value is None, value if value is not None else 0)


class MemoryRowStore(RowStore):
    """
    Thread-safe in-memory tables keyed by normalized id.

    Example:
        store = MemoryRowStore()
        product = store.insert("products", {"name": "Quad kit", "price": 4999})
        store.get("products", product["id"])
    """

    def __init__(self):
        self._tables: dict[str, dict[str, Row]] = {name: {} for name in TABLES}
        self._identity = {name: itertools.count(1) for name in TABLES}
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _schema(self, table: str) -> TableSchema:
        schema = TABLES.get(table)
        if schema is None:
            raise RowStoreError(
                f"Unknown table: {table}",
                code="UNKNOWN_TABLE",
                details={"table": table},
            )
        return schema

    def _new_key(self, schema: TableSchema, row: Row) -> Any:
        if schema.key == KeyKind.IDENTITY:
            return next(self._identity[schema.name])
        if schema.key == KeyKind.UUID:
            return row.get("id") or str(uuid.uuid4())
        if not row.get("id"):
            raise RowStoreError(
                f"{schema.name}.id must be supplied",
                code="NOT_NULL_VIOLATION",
                details={"table": schema.name, "column": "id"},
            )
        return str(row["id"])

    def _check_foreign_keys(self, schema: TableSchema, row: Row) -> None:
        for fk in schema.foreign_keys:
            value = row.get(fk.column)
            if value is None:
                continue
            if normalize_id(value) not in self._tables[fk.references]:
                raise RowStoreError(
                    f"{schema.name}.{fk.column} references a missing {fk.references} row",
                    code="FOREIGN_KEY_VIOLATION",
                    details={"table": schema.name, "column": fk.column, "value": str(value)},
                )

    @staticmethod
    def _matches(row: Row, filters: dict[str, Any]) -> bool:
        for column, expected in filters.items():
            actual = row.get(column)
            if expected is None:
                if actual is not None:
                    return False
            elif column == "id" or column.endswith("_id"):
                if normalize_id(actual) != normalize_id(expected):
                    return False
            elif actual != expected:
                return False
        return True

    # -------------------------------------------------------------------------
    # RowStore
    # -------------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        self._schema(table)
        with self._lock:
            rows = [r for r in self._tables[table].values() if self._matches(r, filters or {})]
            if order_by:
                rows.sort(key=lambda r: _sort_key(r.get(order_by)), reverse=descending)
            if limit is not None:
                rows = rows[:limit]
            return copy.deepcopy(rows)

    def insert(self, table: str, row: Row) -> Row:
        schema = self._schema(table)
        with self._lock:
            record: Row = {}
            for column, default in schema.defaults.items():
                record[column] = default() if callable(default) else default
            record.update(copy.deepcopy(row))

            missing = [c for c in schema.required if record.get(c) is None]
            if missing:
                raise RowStoreError(
                    f"Missing required columns for {table}: {', '.join(missing)}",
                    code="NOT_NULL_VIOLATION",
                    details={"table": table, "columns": missing},
                )

            record["id"] = self._new_key(schema, row)
            key = normalize_id(record["id"])
            if key in self._tables[table]:
                raise RowStoreError(
                    f"Duplicate key in {table}: {key}",
                    code="UNIQUE_VIOLATION",
                    details={"table": table, "id": key},
                )
            record.setdefault("created_at", utc_now_iso())
            self._check_foreign_keys(schema, record)

            self._tables[table][key] = record
            logger.debug(f"Inserted {table} row {key}")
            return copy.deepcopy(record)

    def update(self, table: str, row_id: Any, changes: Row) -> Row | None:
        schema = self._schema(table)
        key = normalize_id(row_id)
        with self._lock:
            existing = self._tables[table].get(key)
            if existing is None:
                return None
            merged = {**existing, **copy.deepcopy(changes), "id": existing["id"]}
            self._check_foreign_keys(schema, merged)
            self._tables[table][key] = merged
            logger.debug(f"Updated {table} row {key}")
            return copy.deepcopy(merged)

    def delete(self, table: str, row_id: Any) -> bool:
        self._schema(table)
        key = normalize_id(row_id)
        with self._lock:
            if key not in self._tables[table]:
                return False
            del self._tables[table][key]
            self._apply_on_delete(table, key)
            logger.debug(f"Deleted {table} row {key}")
            return True

    def _apply_on_delete(self, table: str, key: str) -> None:
        for child, fk in referencing(table):
            dependents = [
                child_key
                for child_key, child_row in self._tables[child.name].items()
                if normalize_id(child_row.get(fk.column)) == key
            ]
            for child_key in dependents:
                if fk.on_delete == OnDelete.CASCADE:
                    # The row may already be gone through another cascade path
                    if self._tables[child.name].pop(child_key, None) is not None:
                        self._apply_on_delete(child.name, child_key)
                else:
                    self._tables[child.name][child_key][fk.column] = None

    def clear(self) -> None:
        """Drop every row (test helper)."""
        with self._lock:
            for rows in self._tables.values():
                rows.clear()
