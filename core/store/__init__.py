# =============================================================================
# core/store/ - Row Storage Backends
# =============================================================================
# - base.py: RowStore interface and store errors
# - schema.py: table names, defaults and foreign keys
# - memory.py: in-process backend (development, tests)
# - supabase_store.py: Supabase/PostgREST backend
# =============================================================================

from .base import Row, RowStore, RowStoreError, StoreUnavailableError
from .memory import MemoryRowStore
from .schema import (
    ANALYTICS_EVENTS,
    CURRICULUM_MODULES,
    ORDER_ITEMS,
    ORDERS,
    PRODUCTS,
    PROFILES,
    TABLES,
)

__all__ = [
    "Row",
    "RowStore",
    "RowStoreError",
    "StoreUnavailableError",
    "MemoryRowStore",
    "ANALYTICS_EVENTS",
    "CURRICULUM_MODULES",
    "ORDER_ITEMS",
    "ORDERS",
    "PRODUCTS",
    "PROFILES",
    "TABLES",
]
