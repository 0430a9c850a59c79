# =============================================================================
# core/services/profile_service.py - Principal Profiles
# =============================================================================

import logging
from typing import Any

from app.exceptions import NoRowsAffectedError, ProfileExistsError, RowNotFoundError
from core.access import Requester
from core.models.profile import ProfileCreate, ProfileUpdate
from core.services.gateway import DataGateway
from core.store.schema import PROFILES

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Profile operations on behalf of a requester.

    Customers can read and rename only themselves; admins can read, change
    roles on, and delete any profile. Those limits are enforced by the
    gateway, so this class never checks roles itself.
    """

    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def get_profile(self, requester: Requester, profile_id: Any) -> dict[str, Any]:
        row = self.gateway.get(requester, PROFILES, profile_id)
        if row is None:
            raise RowNotFoundError(PROFILES, str(profile_id))
        return row

    def find_profile(self, requester: Requester, profile_id: Any) -> dict[str, Any] | None:
        return self.gateway.get(requester, PROFILES, profile_id)

    def list_profiles(self, requester: Requester) -> list[dict[str, Any]]:
        return self.gateway.select(requester, PROFILES, order_by="created_at")

    def create_own_profile(self, requester: Requester, data: ProfileCreate) -> dict[str, Any]:
        """
        Create the requester's own profile row.

        Raises:
            NoRowsAffectedError: If the requester is anonymous or asked for a
                role they may not assign themselves
            ProfileExistsError: If the requester already has a profile
        """
        if requester.authenticated and self.gateway.store.get(PROFILES, requester.id) is not None:
            raise ProfileExistsError(requester.id)

        row = {
            "id": requester.id,
            "full_name": data.full_name,
            "role": data.role.value,
        }
        created = self.gateway.insert(requester, PROFILES, row)
        if created is None:
            raise NoRowsAffectedError(PROFILES)
        logger.info(f"Created profile {created['id']} with role {created['role']}")
        return created

    def update_profile(
        self,
        requester: Requester,
        profile_id: Any,
        data: ProfileUpdate,
    ) -> dict[str, Any]:
        updated = self.gateway.update(requester, PROFILES, profile_id, data.changes())
        if updated is None:
            raise NoRowsAffectedError(PROFILES, str(profile_id))
        return updated

    def delete_profile(self, requester: Requester, profile_id: Any) -> None:
        """Delete a profile. Orders and events keep existing with a NULL owner."""
        if not self.gateway.delete(requester, PROFILES, profile_id):
            raise NoRowsAffectedError(PROFILES, str(profile_id))
        logger.info(f"Deleted profile {profile_id}")
