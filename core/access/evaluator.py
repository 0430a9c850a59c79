# =============================================================================
# core/access/evaluator.py - Access-Control Evaluator
# =============================================================================
# Decides, per row and per call, whether a requester may perform an
# operation. Nothing is cached between calls: the admin flag is re-read from
# the profiles table every time a context is built, so a role change applies
# to the very next request.
#
# AdminCheck is the one privileged reader. The profiles rules themselves
# depend on "is the requester an admin", so that question cannot be answered
# through the profiles rules without recursing into itself. AdminCheck reads
# the requester's own profile row straight from the store and exposes nothing
# but a yes/no answer.
# =============================================================================

import logging
from typing import Any

from core.access.policies import (
    POLICIES,
    Operation,
    PolicyContext,
    Requester,
    Role,
    TablePolicy,
)
from core.store.base import RowStore
from core.store.schema import PROFILES

logger = logging.getLogger(__name__)


class AdminCheck:
    """
    Answers "is this requester an admin?" and nothing else.

    Example:
        is_admin = AdminCheck(store)
        if is_admin(Requester.for_user(user_id)):
            ...
    """

    __slots__ = ("_store",)

    def __init__(self, store: RowStore):
        self._store = store

    def __call__(self, requester: Requester) -> bool:
        if not requester.authenticated:
            return False
        profile = self._store.get(PROFILES, requester.id)
        return profile is not None and profile.get("role") == Role.ADMIN.value


class AccessEvaluator:
    """
    Evaluates the table policies in core.access.policies.

    Args:
        store: Used only to resolve parent rows for inherited rules
        admin_check: Privileged admin predicate (defaults to AdminCheck(store))
        policies: Table name -> TablePolicy
    """

    def __init__(
        self,
        store: RowStore,
        admin_check: AdminCheck | None = None,
        policies: dict[str, TablePolicy] | None = None,
    ):
        self._store = store
        self._admin_check = admin_check or AdminCheck(store)
        self._policies = POLICIES if policies is None else policies

    def context(self, requester: Requester) -> PolicyContext:
        """Build a per-call context, resolving the requester's current role."""
        return PolicyContext(
            requester=requester,
            is_admin=self._admin_check(requester),
            fetch=self._store.get,
        )

    def permits(
        self,
        ctx: PolicyContext,
        operation: Operation,
        table: str,
        row: dict[str, Any],
        new_row: dict[str, Any] | None = None,
    ) -> bool:
        """
        Evaluate one operation on one row.

        For UPDATE, `row` is the stored row (using-rule) and `new_row` the
        row as it would look after the write (check-rule).
        """
        policy = self._policies.get(table)
        if policy is None:
            logger.warning(f"No access policy for table {table}; denying {operation.value}")
            return False

        if operation == Operation.SELECT:
            return policy.select(ctx, row)
        if operation == Operation.INSERT:
            return policy.insert_check(ctx, row)
        if operation == Operation.DELETE:
            return policy.delete_using(ctx, row)
        if operation == Operation.UPDATE:
            return policy.update_using(ctx, row) and policy.update_check(
                ctx, row if new_row is None else new_row
            )
        return False

    def allows(
        self,
        requester: Requester,
        operation: Operation,
        table: str,
        row: dict[str, Any],
        new_row: dict[str, Any] | None = None,
    ) -> bool:
        """Convenience form of `permits` that builds its own context."""
        return self.permits(self.context(requester), operation, table, row, new_row)
