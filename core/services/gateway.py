# =============================================================================
# core/services/gateway.py - Requester-Scoped Data Access
# =============================================================================
# Every read and write in the application goes through DataGateway with an
# explicit Requester. Each call builds a fresh PolicyContext (re-reading the
# requester's role) and filters rows through the AccessEvaluator before they
# reach the caller.
#
# Denial is silent:
#   select -> the row is left out
#   insert / update -> None ("no rows affected")
#   delete -> False
# =============================================================================

import logging
from typing import Any

from core.access import AccessEvaluator, Operation, Requester
from core.store.base import Row, RowStore

logger = logging.getLogger(__name__)


class DataGateway:
    """
    Row-level secured CRUD over a RowStore.

    Example:
        gateway = DataGateway(store)
        visible = gateway.select(requester, "orders", order_by="created_at", descending=True)
    """

    def __init__(self, store: RowStore, evaluator: AccessEvaluator | None = None):
        self.store = store
        self.evaluator = evaluator or AccessEvaluator(store)

    def select(
        self,
        requester: Requester,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        ctx = self.evaluator.context(requester)
        rows = self.store.select(table, filters, order_by=order_by, descending=descending)
        visible = [
            row for row in rows
            if self.evaluator.permits(ctx, Operation.SELECT, table, row)
        ]
        if len(visible) < len(rows):
            logger.debug(
                f"Filtered {len(rows) - len(visible)} {table} rows for requester {requester.id}"
            )
        return visible[:limit] if limit is not None else visible

    def get(self, requester: Requester, table: str, row_id: Any) -> Row | None:
        rows = self.select(requester, table, {"id": row_id}, limit=1)
        return rows[0] if rows else None

    def count(self, requester: Requester, table: str, filters: dict[str, Any] | None = None) -> int:
        return len(self.select(requester, table, filters))

    def insert(self, requester: Requester, table: str, row: Row) -> Row | None:
        ctx = self.evaluator.context(requester)
        if not self.evaluator.permits(ctx, Operation.INSERT, table, row):
            logger.info(f"Insert into {table} rejected for requester {requester.id}")
            return None
        return self.store.insert(table, row)

    def update(self, requester: Requester, table: str, row_id: Any, changes: Row) -> Row | None:
        existing = self.store.get(table, row_id)
        if existing is None:
            return None

        ctx = self.evaluator.context(requester)
        proposed = {**existing, **changes}
        if not self.evaluator.permits(ctx, Operation.UPDATE, table, existing, new_row=proposed):
            logger.info(f"Update of {table}/{row_id} rejected for requester {requester.id}")
            return None

        if not changes:
            return existing
        return self.store.update(table, row_id, changes)

    def delete(self, requester: Requester, table: str, row_id: Any) -> bool:
        existing = self.store.get(table, row_id)
        if existing is None:
            return False

        ctx = self.evaluator.context(requester)
        if not self.evaluator.permits(ctx, Operation.DELETE, table, existing):
            logger.info(f"Delete of {table}/{row_id} rejected for requester {requester.id}")
            return False
        return self.store.delete(table, row_id)
