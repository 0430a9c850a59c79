# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - profile.py: principal profiles and roles
# - curriculum.py: curriculum modules and their assets
# - product.py: shop products
# - order.py: orders and order items
# - analytics.py: analytics events and dashboard stats
# - assistant.py: AI chat and quiz schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .profile import ProfileCreate, ProfileResponse, ProfileUpdate
from .curriculum import (
    Asset,
    AssetType,
    CurriculumModuleCreate,
    CurriculumModuleResponse,
    CurriculumModuleUpdate,
)
from .product import ProductCreate, ProductResponse, ProductUpdate
from .order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    OrderStatus,
    OrderStatusUpdate,
)
from .analytics import AnalyticsEventCreate, AnalyticsEventResponse, DashboardStats
from .assistant import (
    ChatRequest,
    ChatResponse,
    QuizOptionModel,
    QuizQuestionModel,
    QuizResponse,
    QuizScoreRequest,
    QuizScoreResponse,
)

__all__ = [
    # Profile
    "ProfileCreate",
    "ProfileResponse",
    "ProfileUpdate",
    # Curriculum
    "Asset",
    "AssetType",
    "CurriculumModuleCreate",
    "CurriculumModuleResponse",
    "CurriculumModuleUpdate",
    # Product
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
    # Order
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderStatus",
    "OrderStatusUpdate",
    # Analytics
    "AnalyticsEventCreate",
    "AnalyticsEventResponse",
    "DashboardStats",
    # Assistant
    "ChatRequest",
    "ChatResponse",
    "QuizOptionModel",
    "QuizQuestionModel",
    "QuizResponse",
    "QuizScoreRequest",
    "QuizScoreResponse",
]
