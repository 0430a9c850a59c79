# =============================================================================
# tests/test_bootstrap.py - Default Admin Provisioning Tests
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.access import AdminCheck, Requester
from core.services.bootstrap_service import BootstrapError, ensure_admin

NEW_USER_ID = "44444444-4444-4444-8444-444444444444"


def auth_admin_with(users):
    auth_admin = MagicMock()
    auth_admin.list_users.return_value = users
    auth_admin.create_user.return_value = SimpleNamespace(user=SimpleNamespace(id=NEW_USER_ID))
    return auth_admin


class TestEnsureAdmin:
    def test_creates_user_and_admin_profile(self, store):
        auth_admin = auth_admin_with([])

        result = ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")

        assert result.created_user is True
        assert result.user_id == NEW_USER_ID
        attributes = auth_admin.create_user.call_args.args[0]
        assert attributes["email_confirm"] is True
        assert attributes["user_metadata"] == {"full_name": "Lab Admin", "role": "admin"}
        assert store.get("profiles", NEW_USER_ID)["role"] == "admin"
        assert AdminCheck(store)(Requester.for_user(NEW_USER_ID)) is True

    def test_existing_user_is_reused(self, store):
        existing = SimpleNamespace(id=NEW_USER_ID, email="Admin@Skylab.test")
        auth_admin = auth_admin_with([existing])

        result = ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")

        assert result.created_user is False
        auth_admin.create_user.assert_not_called()

    def test_idempotent(self, store):
        existing = SimpleNamespace(id=NEW_USER_ID, email="admin@skylab.test")
        auth_admin = auth_admin_with([existing])

        ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")
        ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")

        assert len(store.select("profiles")) == 1

    def test_promotes_existing_customer_profile(self, store):
        store.insert("profiles", {"id": NEW_USER_ID, "full_name": "Old", "role": "customer"})
        auth_admin = auth_admin_with([SimpleNamespace(id=NEW_USER_ID, email="admin@skylab.test")])

        result = ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")

        assert result.profile["role"] == "admin"
        assert result.profile["full_name"] == "Lab Admin"

    def test_lookup_failure(self, store):
        auth_admin = MagicMock()
        auth_admin.list_users.side_effect = RuntimeError("invalid service key")

        with pytest.raises(BootstrapError, match="Admin lookup failed"):
            ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")

    def test_create_without_user_id(self, store):
        auth_admin = auth_admin_with([])
        auth_admin.create_user.return_value = SimpleNamespace(user=None)

        with pytest.raises(BootstrapError, match="Unable to resolve admin user id"):
            ensure_admin(store, auth_admin, "admin@skylab.test", "secret", "Lab Admin")
