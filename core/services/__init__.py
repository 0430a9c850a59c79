# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .gateway import DataGateway
from .profile_service import ProfileService
from .catalog_service import CatalogService
from .order_service import OrderService
from .analytics_service import AnalyticsService, DashboardService
from .storage_service import StorageService
from .assistant_service import AssistantService, QuizService
from .bootstrap_service import BootstrapError, ensure_admin

__all__ = [
    "DataGateway",
    "ProfileService",
    "CatalogService",
    "OrderService",
    "AnalyticsService",
    "DashboardService",
    "StorageService",
    "AssistantService",
    "QuizService",
    "BootstrapError",
    "ensure_admin",
]
