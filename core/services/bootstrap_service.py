# =============================================================================
# core/services/bootstrap_service.py - Default Admin Provisioning
# =============================================================================
# Ensures an admin account exists: an auth user with the configured email and
# a profiles row with role "admin". Safe to run repeatedly.
#
# Runs with the service role and writes through the RowStore directly, since
# no admin exists yet to authorize the write.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any

from core.access import Role
from core.store import RowStore
from core.store.schema import PROFILES
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class BootstrapError(ApplicationError):
    """Raised when the admin account cannot be provisioned."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(message=message, code="BOOTSTRAP_FAILED", suggestion=suggestion)


@dataclass
class BootstrapResult:
    user_id: str
    created_user: bool
    profile: dict[str, Any]


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def find_user_id(auth_admin: Any, email: str) -> str | None:
    """Look up an auth user id by email (case-insensitive)."""
    wanted = email.strip().lower()
    for user in auth_admin.list_users() or []:
        if (_field(user, "email") or "").strip().lower() == wanted:
            return str(_field(user, "id"))
    return None


def ensure_admin(
    store: RowStore,
    auth_admin: Any,
    email: str,
    password: str,
    full_name: str,
) -> BootstrapResult:
    """
    Create the admin auth user if missing and upsert its admin profile.

    Args:
        store: Row store (service role)
        auth_admin: Supabase auth admin API (client.auth.admin)
        email: Admin email
        password: Password used only when the user is created
        full_name: Display name stored on the profile

    Returns:
        BootstrapResult with the admin's user id

    Raises:
        BootstrapError: If the user cannot be found or created, or the
            profile cannot be written
    """
    logger.info(f"Checking for admin account {email}...")
    try:
        user_id = find_user_id(auth_admin, email)
    except Exception as e:
        raise BootstrapError(f"Admin lookup failed: {e}") from e

    created = False
    if user_id is None:
        logger.info("Admin not found. Creating...")
        try:
            response = auth_admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"full_name": full_name, "role": Role.ADMIN.value},
            })
        except Exception as e:
            raise BootstrapError(f"User creation failed: {e}") from e

        user = _field(response, "user")
        if user is None or not _field(user, "id"):
            raise BootstrapError("Unable to resolve admin user id.")
        user_id = str(_field(user, "id"))
        created = True

    try:
        profile = store.upsert(
            PROFILES,
            {"id": user_id, "full_name": full_name, "role": Role.ADMIN.value},
        )
    except ApplicationError as e:
        raise BootstrapError(
            f"Profile upsert failed: {e.message}",
            suggestion="Create the tables from supabase/schema.sql first",
        ) from e

    logger.info(f"Admin ready: {user_id}")
    return BootstrapResult(user_id=user_id, created_user=created, profile=profile)
