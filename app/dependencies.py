# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The row store and the catalog cache are process-wide singletons; services
# are cheap wrappers built per request around them.
# =============================================================================

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services import (
    AnalyticsService,
    AssistantService,
    CatalogService,
    DashboardService,
    DataGateway,
    OrderService,
    ProfileService,
    QuizService,
    StorageService,
)
from core.store import MemoryRowStore, RowStore, StoreUnavailableError
from core.store.supabase_store import SupabaseRowStore
from lib.cache import ReadThroughCache

logger = logging.getLogger(__name__)


@lru_cache
def get_row_store() -> RowStore:
    """
    Get the configured row store.

    DATA_BACKEND=memory gives an empty in-process store (development, tests);
    anything else talks to Supabase with the service-role key.
    """
    if settings.DATA_BACKEND == "memory":
        logger.info("Using in-memory row store")
        return MemoryRowStore()
    return SupabaseRowStore()


@lru_cache
def get_catalog_cache() -> ReadThroughCache:
    """Cache for the public catalog snapshots."""
    return ReadThroughCache(
        ttl_seconds=settings.CATALOG_CACHE_TTL_SECONDS,
        max_stale_seconds=settings.CATALOG_CACHE_MAX_STALE_SECONDS,
        serve_stale_on=(StoreUnavailableError,),
    )


def get_gateway(store: Annotated[RowStore, Depends(get_row_store)]) -> DataGateway:
    return DataGateway(store)


GatewayDep = Annotated[DataGateway, Depends(get_gateway)]


def get_profile_service(gateway: GatewayDep) -> ProfileService:
    return ProfileService(gateway)


def get_catalog_service(
    gateway: GatewayDep,
    cache: Annotated[ReadThroughCache, Depends(get_catalog_cache)],
) -> CatalogService:
    return CatalogService(gateway, cache)


def get_order_service(gateway: GatewayDep) -> OrderService:
    return OrderService(gateway)


def get_analytics_service(gateway: GatewayDep) -> AnalyticsService:
    return AnalyticsService(gateway)


def get_dashboard_service(gateway: GatewayDep) -> DashboardService:
    return DashboardService(gateway)


@lru_cache
def get_storage_service() -> StorageService:
    return StorageService()


@lru_cache
def get_assistant_service() -> AssistantService:
    return AssistantService()


def get_quiz_service(
    assistant: Annotated[AssistantService, Depends(get_assistant_service)],
) -> QuizService:
    return QuizService(assistant)


# Type aliases for dependency injection
StoreDep = Annotated[RowStore, Depends(get_row_store)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
StorageServiceDep = Annotated[StorageService, Depends(get_storage_service)]
AssistantServiceDep = Annotated[AssistantService, Depends(get_assistant_service)]
QuizServiceDep = Annotated[QuizService, Depends(get_quiz_service)]
