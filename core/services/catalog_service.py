# =============================================================================
# core/services/catalog_service.py - Curriculum & Product Catalog
# =============================================================================
# Public catalog reads (published curriculum, products) are loaded as the
# anonymous requester and kept in a ReadThroughCache, so the cache never holds
# anything an anonymous visitor could not see. When Supabase is unreachable:
#
#   1. a cached snapshot younger than CATALOG_CACHE_MAX_STALE_SECONDS is served
#   2. products fall back to any older snapshot plus FALLBACK_PRODUCTS
#   3. curriculum raises BackendUnavailableError (a status message for the UI)
#
# Admin reads that include unpublished modules bypass the cache.
# =============================================================================

import logging
from typing import Any

from app.exceptions import BackendUnavailableError, NoRowsAffectedError, RowNotFoundError
from core.access import Requester
from core.models.curriculum import (
    CurriculumModuleCreate,
    CurriculumModuleUpdate,
    parse_assets,
)
from core.models.product import ProductCreate, ProductUpdate
from core.services.gateway import DataGateway
from core.store.base import StoreUnavailableError
from core.store.schema import CURRICULUM_MODULES, PRODUCTS
from lib.cache import ReadThroughCache
from lib.utils import normalize_id

logger = logging.getLogger(__name__)

PUBLIC_PRODUCTS_KEY = "products"
PUBLIC_CURRICULUM_KEY = "curriculum:published"

# Shown when the shop cannot reach Supabase and has never cached a catalog.
FALLBACK_PRODUCTS: list[dict[str, Any]] = [
    {
        "id": "5a1c9e52-0c4e-4c55-9b8e-6f1d2a0b7c01",
        "name": "Skylab Trainer Quadcopter",
        "description": "Programmable classroom quadcopter with Python SDK and prop guards.",
        "image_url": None,
        "gallery_urls": [],
        "price": 14999,
        "stock": 0,
        "delivery_eta": "5-7 days",
        "featured": True,
    },
    {
        "id": "5a1c9e52-0c4e-4c55-9b8e-6f1d2a0b7c02",
        "name": "Flight Controller Learning Kit",
        "description": "Sensor board, IMU and telemetry module for lab activities.",
        "image_url": None,
        "gallery_urls": [],
        "price": 6499,
        "stock": 0,
        "delivery_eta": None,
        "featured": False,
    },
]


def _merge_products(*sources: list[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: set[str] = set()
    merged = []
    for source in sources:
        for product in source:
            key = normalize_id(product.get("id"))
            if key in seen:
                continue
            seen.add(key)
            merged.append(product)
    return merged


class CatalogService:
    """
    Curriculum modules and shop products.

    Args:
        gateway: Requester-scoped data access
        cache: Cache for the public (anonymous) catalog views
    """

    def __init__(self, gateway: DataGateway, cache: ReadThroughCache):
        self.gateway = gateway
        self.cache = cache

    # -------------------------------------------------------------------------
    # Curriculum
    # -------------------------------------------------------------------------

    def _load_public_curriculum(self) -> list[dict[str, Any]]:
        return self.gateway.select(
            Requester.anonymous(),
            CURRICULUM_MODULES,
            {"published": True},
            order_by="created_at",
            descending=True,
        )

    def list_curriculum(
        self,
        requester: Requester,
        grade: str | None = None,
        subject: str | None = None,
        include_unpublished: bool = False,
    ) -> list[dict[str, Any]]:
        """
        List modules visible to the requester, newest first.

        `include_unpublished` only makes a difference for admins; for
        everyone else unpublished rows are filtered out by the access rules.
        """
        try:
            if include_unpublished:
                rows = self.gateway.select(
                    requester, CURRICULUM_MODULES, order_by="created_at", descending=True
                )
            else:
                rows = self.cache.get(PUBLIC_CURRICULUM_KEY, self._load_public_curriculum)
        except StoreUnavailableError as e:
            raise BackendUnavailableError(e.message) from e

        if grade:
            rows = [r for r in rows if r.get("grade") == grade]
        if subject:
            rows = [r for r in rows if r.get("subject") == subject]
        return rows

    def get_curriculum(self, requester: Requester, module_id: Any) -> dict[str, Any]:
        try:
            row = self.gateway.get(requester, CURRICULUM_MODULES, module_id)
        except StoreUnavailableError as e:
            cached = self.cache.peek(PUBLIC_CURRICULUM_KEY) or []
            row = next((r for r in cached if normalize_id(r["id"]) == normalize_id(module_id)), None)
            if row is None:
                raise BackendUnavailableError(e.message) from e
        if row is None:
            raise RowNotFoundError(CURRICULUM_MODULES, str(module_id))
        return row

    def create_curriculum(self, requester: Requester, data: CurriculumModuleCreate) -> dict[str, Any]:
        created = self.gateway.insert(requester, CURRICULUM_MODULES, data.to_row())
        if created is None:
            raise NoRowsAffectedError(CURRICULUM_MODULES)
        self.cache.expire(PUBLIC_CURRICULUM_KEY)
        logger.info(f"Created curriculum module {created['id']} ({data.grade}, {data.subject})")
        return created

    def update_curriculum(
        self,
        requester: Requester,
        module_id: Any,
        data: CurriculumModuleUpdate,
    ) -> dict[str, Any]:
        current = self.gateway.get(requester, CURRICULUM_MODULES, module_id)
        if current is None:
            raise NoRowsAffectedError(CURRICULUM_MODULES, str(module_id))
        changes = data.changes(parse_assets(current.get("asset_urls")))
        updated = self.gateway.update(requester, CURRICULUM_MODULES, module_id, changes)
        if updated is None:
            raise NoRowsAffectedError(CURRICULUM_MODULES, str(module_id))
        self.cache.expire(PUBLIC_CURRICULUM_KEY)
        return updated

    def delete_curriculum(self, requester: Requester, module_id: Any) -> None:
        if not self.gateway.delete(requester, CURRICULUM_MODULES, module_id):
            raise NoRowsAffectedError(CURRICULUM_MODULES, str(module_id))
        self.cache.expire(PUBLIC_CURRICULUM_KEY)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def _load_public_products(self) -> list[dict[str, Any]]:
        return self.gateway.select(
            Requester.anonymous(), PRODUCTS, order_by="created_at", descending=True
        )

    def _product_snapshot(self) -> list[dict[str, Any]]:
        try:
            return self.cache.get(PUBLIC_PRODUCTS_KEY, self._load_public_products)
        except StoreUnavailableError as e:
            logger.warning(f"Products falling back to static data: {e.message}")
            return _merge_products(self.cache.peek(PUBLIC_PRODUCTS_KEY) or [], FALLBACK_PRODUCTS)

    def list_products(self, requester: Requester, featured: bool | None = None) -> list[dict[str, Any]]:
        # Products are readable by everyone, so the shared snapshot serves all requesters
        rows = self._product_snapshot()
        if featured is not None:
            rows = [r for r in rows if bool(r.get("featured")) == featured]
        return rows

    def get_product(self, requester: Requester, product_id: Any) -> dict[str, Any]:
        try:
            row = self.gateway.get(requester, PRODUCTS, product_id)
        except StoreUnavailableError as e:
            logger.warning(f"Product lookup falling back to cached data: {e.message}")
            snapshot = _merge_products(self.cache.peek(PUBLIC_PRODUCTS_KEY) or [], FALLBACK_PRODUCTS)
            row = next(
                (p for p in snapshot if normalize_id(p["id"]) == normalize_id(product_id)),
                None,
            )
        if row is None:
            raise RowNotFoundError(PRODUCTS, str(product_id))
        return row

    def create_product(self, requester: Requester, data: ProductCreate) -> dict[str, Any]:
        created = self.gateway.insert(requester, PRODUCTS, data.to_row())
        if created is None:
            raise NoRowsAffectedError(PRODUCTS)
        self.cache.expire(PUBLIC_PRODUCTS_KEY)
        logger.info(f"Created product {created['id']}: {created['name']}")
        return created

    def update_product(self, requester: Requester, product_id: Any, data: ProductUpdate) -> dict[str, Any]:
        updated = self.gateway.update(requester, PRODUCTS, product_id, data.changes())
        if updated is None:
            raise NoRowsAffectedError(PRODUCTS, str(product_id))
        self.cache.expire(PUBLIC_PRODUCTS_KEY)
        return updated

    def delete_product(self, requester: Requester, product_id: Any) -> None:
        if not self.gateway.delete(requester, PRODUCTS, product_id):
            raise NoRowsAffectedError(PRODUCTS, str(product_id))
        self.cache.expire(PUBLIC_PRODUCTS_KEY)
