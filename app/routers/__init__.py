# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - profiles.py: Principal profiles
# - curriculum.py: Curriculum modules and module quizzes
# - products.py: Shop catalog
# - orders.py: Order placement and fulfilment status
# - analytics.py: Analytics events and dashboard stats
# - uploads.py: Storage uploads (admin)
# - assistant.py: AI assistant chat and quiz scoring
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import profiles
from . import curriculum
from . import products
from . import orders
from . import analytics
from . import uploads
from . import assistant

__all__ = [
    "health",
    "profiles",
    "curriculum",
    "products",
    "orders",
    "analytics",
    "uploads",
    "assistant",
]
