# =============================================================================
# app/routers/profiles.py - Profile Endpoints
# =============================================================================
# Customers see and edit only their own profile; admins see all of them.
# Requests for rows the caller may not see get the same 404 as missing rows.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from app.auth import require_requester
from app.dependencies import ProfileServiceDep
from core.access import Requester
from core.models.profile import ProfileCreate, ProfileResponse, ProfileUpdate

router = APIRouter()


@router.get("", response_model=list[ProfileResponse])
async def list_profiles(
    profiles: ProfileServiceDep,
    requester: Requester = Depends(require_requester),
):
    """List profiles visible to the caller (just their own unless admin)."""
    return profiles.list_profiles(requester)


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: ProfileCreate,
    profiles: ProfileServiceDep,
    requester: Requester = Depends(require_requester),
):
    """
    Create the caller's own profile.

    The id is always the caller's user id. Asking for the admin role is
    rejected with 403 unless the caller is already an admin.
    """
    return profiles.create_own_profile(requester, request)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: Annotated[UUID, Path(description="Profile (auth user) UUID")],
    profiles: ProfileServiceDep,
    requester: Requester = Depends(require_requester),
):
    return profiles.get_profile(requester, profile_id)


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: Annotated[UUID, Path(description="Profile (auth user) UUID")],
    request: ProfileUpdate,
    profiles: ProfileServiceDep,
    requester: Requester = Depends(require_requester),
):
    """
    Update a profile.

    Customers may rename themselves but not change their role.
    """
    return profiles.update_profile(requester, profile_id, request)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profile(
    profile_id: Annotated[UUID, Path(description="Profile (auth user) UUID")],
    profiles: ProfileServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Delete a profile (admin). The user's orders are kept, unowned."""
    profiles.delete_profile(requester, profile_id)
