# =============================================================================
# core/store/schema.py - Table Definitions
# =============================================================================
# Column defaults, key generation and foreign keys for every table. This is
# the Python-side mirror of supabase/schema.sql; the in-memory store applies
# it directly, Postgres applies the SQL version.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

PROFILES = "profiles"
CURRICULUM_MODULES = "curriculum_modules"
PRODUCTS = "products"
ORDERS = "orders"
ORDER_ITEMS = "order_items"
ANALYTICS_EVENTS = "analytics_events"


class KeyKind(str, Enum):
    """How a table's primary key is produced."""
    SUPPLIED = "supplied"    # caller provides it (profiles.id = auth user id)
    UUID = "uuid"            # gen_random_uuid()
    IDENTITY = "identity"    # bigint generated always as identity


class OnDelete(str, Enum):
    CASCADE = "cascade"
    SET_NULL = "set null"


@dataclass(frozen=True)
class ForeignKey:
    column: str
    references: str
    on_delete: OnDelete


@dataclass(frozen=True)
class TableSchema:
    name: str
    key: KeyKind
    # Value or zero-arg factory (for mutable defaults such as lists)
    defaults: dict[str, Any | Callable[[], Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()


TABLES: dict[str, TableSchema] = {
    PROFILES: TableSchema(
        name=PROFILES,
        key=KeyKind.SUPPLIED,
        defaults={"full_name": None, "role": "customer"},
    ),
    CURRICULUM_MODULES: TableSchema(
        name=CURRICULUM_MODULES,
        key=KeyKind.UUID,
        defaults={
            "description": None,
            "asset_urls": list,
            "price_yearly": None,
            "published": True,
        },
        required=("title", "grade", "subject", "module"),
    ),
    PRODUCTS: TableSchema(
        name=PRODUCTS,
        key=KeyKind.UUID,
        defaults={
            "description": None,
            "image_url": None,
            "gallery_urls": list,
            "stock": 0,
            "delivery_eta": None,
            "featured": False,
        },
        required=("name", "price"),
    ),
    ORDERS: TableSchema(
        name=ORDERS,
        key=KeyKind.UUID,
        defaults={"user_id": None, "status": "pending", "total": 0},
        # Orders outlive their owner's account
        foreign_keys=(ForeignKey("user_id", PROFILES, OnDelete.SET_NULL),),
    ),
    ORDER_ITEMS: TableSchema(
        name=ORDER_ITEMS,
        key=KeyKind.IDENTITY,
        defaults={"product_id": None, "qty": 1},
        required=("order_id", "price"),
        foreign_keys=(
            ForeignKey("order_id", ORDERS, OnDelete.CASCADE),
            ForeignKey("product_id", PRODUCTS, OnDelete.SET_NULL),
        ),
    ),
    ANALYTICS_EVENTS: TableSchema(
        name=ANALYTICS_EVENTS,
        key=KeyKind.IDENTITY,
        defaults={"user_id": None, "payload": None},
        required=("event_type",),
        foreign_keys=(ForeignKey("user_id", PROFILES, OnDelete.SET_NULL),),
    ),
}


def referencing(table: str) -> list[tuple[TableSchema, ForeignKey]]:
    """All (child table, foreign key) pairs that point at `table`."""
    return [
        (schema, fk)
        for schema in TABLES.values()
        for fk in schema.foreign_keys
        if fk.references == table
    ]
