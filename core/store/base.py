# =============================================================================
# core/store/base.py - Row Store Interface
# =============================================================================
# The raw storage contract: table name + equality filters + partial rows.
# A RowStore applies NO access control; callers go through
# core.services.gateway.DataGateway, which filters every row with the
# access evaluator. The only other reader is core.access.AdminCheck.
# =============================================================================

from abc import ABC, abstractmethod
from typing import Any

from lib.utils import ApplicationError

Row = dict[str, Any]


class RowStoreError(ApplicationError):
    """A write or query was rejected by the backend (constraint, bad column, ...)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "ROW_STORE_ERROR")
        super().__init__(message, **kwargs)


class StoreUnavailableError(ApplicationError):
    """The backend could not be reached."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "STORE_UNAVAILABLE")
        kwargs.setdefault("suggestion", "Check network access to Supabase and try again")
        super().__init__(message, **kwargs)


class RowStore(ABC):
    """Table-oriented CRUD over a relational backend."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Rows whose columns equal every value in `filters` (None matches NULL)."""

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it with defaults and keys filled in."""

    @abstractmethod
    def update(self, table: str, row_id: Any, changes: Row) -> Row | None:
        """Apply `changes` to the row with this id; None if it does not exist."""

    @abstractmethod
    def delete(self, table: str, row_id: Any) -> bool:
        """Delete the row with this id; False if it does not exist."""

    def get(self, table: str, row_id: Any) -> Row | None:
        if row_id is None:
            return None
        rows = self.select(table, {"id": row_id}, limit=1)
        return rows[0] if rows else None

    def upsert(self, table: str, row: Row) -> Row:
        """Insert, or update the existing row with the same id."""
        existing = self.get(table, row.get("id"))
        if existing is None:
            return self.insert(table, row)
        changes = {k: v for k, v in row.items() if k != "id"}
        return self.update(table, row["id"], changes) or existing
