# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import require_requester
#
#   @router.get("/orders")
#   async def list_orders(requester: Requester = Depends(require_requester)):
#       ...
# =============================================================================

from app.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    get_requester,
    require_admin,
    require_requester,
)
from app.auth.models import AuthUser, UserResponse

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_requester",
    "require_admin",
    "require_requester",
    "AuthUser",
    "UserResponse",
]
