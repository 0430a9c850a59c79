# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from app.dependencies import ProfileServiceDep, StoreDep
from core.access import AdminCheck, Requester
from core.models.profile import ProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    profiles: ProfileServiceDep,
    store: StoreDep,
    user: AuthUser = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user and their profile.

    Returns:
        UserResponse: id, email, admin flag and the profile row (if created)

    Raises:
        401: If not authenticated
    """
    requester = Requester.for_user(user.id)
    profile = profiles.find_profile(requester, user.id)

    return UserResponse(
        id=user.id,
        email=user.email,
        is_admin=AdminCheck(store)(requester),
        profile=ProfileResponse.model_validate(profile) if profile else None,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
