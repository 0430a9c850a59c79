# =============================================================================
# core/access/policies.py - Row-Level Access Rules
# =============================================================================
# Every rule is a pure function of (PolicyContext, row) -> bool. The context
# carries the requester, whether that requester is currently an admin, and a
# row lookup used by rules that inherit visibility from a parent row.
#
# Rules follow Postgres RLS semantics:
#   select / delete / update-using  -> evaluated against the stored row
#   insert / update-check           -> evaluated against the row being written
# A table with no TablePolicy, or an operation with no rule, is denied.
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from core.store.schema import (
    ANALYTICS_EVENTS,
    CURRICULUM_MODULES,
    ORDER_ITEMS,
    ORDERS,
    PRODUCTS,
    PROFILES,
)
from lib.utils import normalize_id


class Role(str, Enum):
    """Principal roles stored on the profiles table."""
    ADMIN = "admin"
    CUSTOMER = "customer"


class Operation(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Requester:
    """
    The identity a data-access call is made on behalf of.

    Passed explicitly to every gateway call. `id` is None for anonymous
    callers. The requester's role is never carried here: it is read from
    the profiles table on each call.
    """
    id: str | None = None

    @classmethod
    def anonymous(cls) -> "Requester":
        return cls(id=None)

    @classmethod
    def for_user(cls, user_id: Any) -> "Requester":
        return cls(id=normalize_id(user_id))

    @property
    def authenticated(self) -> bool:
        return self.id is not None


RowLookup = Callable[[str, Any], "dict[str, Any] | None"]


@dataclass(frozen=True)
class PolicyContext:
    requester: Requester
    is_admin: bool
    fetch: RowLookup

    def owns(self, owner_id: Any) -> bool:
        """True if `owner_id` is the requester's id (NULL owners match nobody)."""
        return (
            self.requester.authenticated
            and owner_id is not None
            and normalize_id(owner_id) == self.requester.id
        )


Rule = Callable[[PolicyContext, dict], bool]


# =============================================================================
# Generic rules
# =============================================================================

def deny(ctx: PolicyContext, row: dict) -> bool:
    return False


def allow(ctx: PolicyContext, row: dict) -> bool:
    return True


def admin_only(ctx: PolicyContext, row: dict) -> bool:
    return ctx.is_admin


# =============================================================================
# profiles
# =============================================================================

def profile_visible(ctx: PolicyContext, row: dict) -> bool:
    return ctx.is_admin or ctx.owns(row.get("id"))


def profile_write_allowed(ctx: PolicyContext, row: dict) -> bool:
    """Non-admins may only write their own row, and only as a customer."""
    if ctx.is_admin:
        return True
    role = row.get("role") or Role.CUSTOMER.value
    return ctx.owns(row.get("id")) and role == Role.CUSTOMER.value


# =============================================================================
# curriculum_modules
# =============================================================================

def curriculum_visible(ctx: PolicyContext, row: dict) -> bool:
    return row.get("published") is True or ctx.is_admin


# =============================================================================
# orders / order_items
# =============================================================================

def order_visible(ctx: PolicyContext, row: dict) -> bool:
    return ctx.is_admin or ctx.owns(row.get("user_id"))


def order_insert_allowed(ctx: PolicyContext, row: dict) -> bool:
    # Owner comes from the session, not from the submitted row
    return ctx.requester.authenticated


def order_item_visible(ctx: PolicyContext, row: dict) -> bool:
    parent = ctx.fetch(ORDERS, row.get("order_id"))
    return parent is not None and order_visible(ctx, parent)


def order_item_insert_allowed(ctx: PolicyContext, row: dict) -> bool:
    parent = ctx.fetch(ORDERS, row.get("order_id"))
    if parent is None:
        return False
    return ctx.is_admin or ctx.owns(parent.get("user_id"))


# =============================================================================
# Policy table
# =============================================================================

@dataclass(frozen=True)
class TablePolicy:
    select: Rule = deny
    insert_check: Rule = deny
    update_using: Rule = deny
    update_check: Rule = deny
    delete_using: Rule = deny


ADMIN_MANAGED = dict(
    insert_check=admin_only,
    update_using=admin_only,
    update_check=admin_only,
    delete_using=admin_only,
)

POLICIES: dict[str, TablePolicy] = {
    PROFILES: TablePolicy(
        select=profile_visible,
        insert_check=profile_write_allowed,
        update_using=profile_visible,
        update_check=profile_write_allowed,
        delete_using=admin_only,
    ),
    CURRICULUM_MODULES: TablePolicy(select=curriculum_visible, **ADMIN_MANAGED),
    PRODUCTS: TablePolicy(select=allow, **ADMIN_MANAGED),
    ORDERS: TablePolicy(
        select=order_visible,
        insert_check=order_insert_allowed,
        update_using=admin_only,
        update_check=admin_only,
        delete_using=admin_only,
    ),
    ORDER_ITEMS: TablePolicy(
        select=order_item_visible,
        insert_check=order_item_insert_allowed,
        update_using=admin_only,
        update_check=admin_only,
        delete_using=admin_only,
    ),
    ANALYTICS_EVENTS: TablePolicy(select=admin_only, **ADMIN_MANAGED),
}
