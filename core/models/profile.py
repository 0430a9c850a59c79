# =============================================================================
# core/models/profile.py - Principal Profile Schemas
# =============================================================================
# One profile row per authenticated principal (id = Supabase auth user id).
# The role column drives every admin decision in core.access.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from core.access.policies import Role


class ProfileCreate(BaseModel):
    """
    Schema for a principal creating their own profile.

    The role defaults to customer. Supplying "admin" is accepted by the
    schema but rejected by the access rules unless the requester is already
    an admin.

    Example:
        {"full_name": "Asha Rao"}
    """

    full_name: str | None = Field(
        default=None,
        max_length=200,
        description="Display name"
    )

    role: Role = Field(
        default=Role.CUSTOMER,
        description="Requested role"
    )


class ProfileUpdate(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""

    full_name: str | None = Field(default=None, max_length=200)
    role: Role | None = Field(
        default=None,
        description="Only admins may change roles"
    )

    def changes(self) -> dict:
        data = self.model_dump(exclude_none=True)
        if "role" in data:
            data["role"] = data["role"].value
        return data


class ProfileResponse(BaseModel):
    """
    Profile as returned to clients.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "full_name": "Asha Rao",
            "role": "customer",
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    id: UUID
    full_name: str | None = None
    role: Role = Role.CUSTOMER
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
