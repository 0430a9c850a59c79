# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from core.models.profile import ProfileResponse


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    model_config = {"frozen": True}


class UserResponse(BaseModel):
    """
    Current user as returned by /auth/me.

    `profile` is None until the user has created their profile row.
    """
    id: UUID
    email: Optional[str] = None
    is_admin: bool = False
    profile: Optional[ProfileResponse] = None
