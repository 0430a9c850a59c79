# =============================================================================
# tests/test_policies.py - Table Access Rule Tests
# =============================================================================
# The rules are pure functions of (context, row), so they are tested here
# without a store; parent lookups go through a dict-backed fetch.
#
# Run with: pytest tests/test_policies.py -v
# =============================================================================

import pytest

from core.access import POLICIES, PolicyContext, Requester, Role
from core.access import policies

USER_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
OTHER_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"


def make_ctx(user_id=USER_ID, is_admin=False, rows=None):
    rows = rows or {}

    def fetch(table, row_id):
        return rows.get((table, str(row_id)))

    requester = Requester.for_user(user_id) if user_id else Requester.anonymous()
    return PolicyContext(requester=requester, is_admin=is_admin, fetch=fetch)


# =============================================================================
# Requester / Context
# =============================================================================

class TestRequester:
    def test_anonymous_is_not_authenticated(self):
        assert Requester.anonymous().authenticated is False
        assert Requester.anonymous().id is None

    def test_for_user_normalizes_uuid(self):
        from uuid import UUID

        requester = Requester.for_user(UUID(USER_ID))
        assert requester.id == USER_ID
        assert requester.authenticated is True

    def test_owns_never_matches_null_owner(self):
        ctx = make_ctx()
        assert ctx.owns(USER_ID) is True
        assert ctx.owns(OTHER_ID) is False
        assert ctx.owns(None) is False

    def test_anonymous_owns_nothing(self):
        ctx = make_ctx(user_id=None)
        assert ctx.owns(None) is False


# =============================================================================
# profiles
# =============================================================================

class TestProfileRules:
    def test_customer_sees_only_own_profile(self):
        ctx = make_ctx()
        assert policies.profile_visible(ctx, {"id": USER_ID}) is True
        assert policies.profile_visible(ctx, {"id": OTHER_ID}) is False

    def test_admin_sees_every_profile(self):
        ctx = make_ctx(is_admin=True)
        assert policies.profile_visible(ctx, {"id": OTHER_ID}) is True

    def test_customer_cannot_write_admin_role(self):
        ctx = make_ctx()
        assert policies.profile_write_allowed(ctx, {"id": USER_ID, "role": "customer"}) is True
        assert policies.profile_write_allowed(ctx, {"id": USER_ID, "role": "admin"}) is False

    def test_missing_role_counts_as_customer(self):
        ctx = make_ctx()
        assert policies.profile_write_allowed(ctx, {"id": USER_ID}) is True

    def test_customer_cannot_write_someone_else(self):
        ctx = make_ctx()
        assert policies.profile_write_allowed(ctx, {"id": OTHER_ID, "role": "customer"}) is False

    def test_admin_may_assign_any_role(self):
        ctx = make_ctx(is_admin=True)
        assert policies.profile_write_allowed(ctx, {"id": OTHER_ID, "role": Role.ADMIN.value}) is True

    def test_only_admin_deletes_profiles(self):
        policy = POLICIES["profiles"]
        assert policy.delete_using(make_ctx(), {"id": USER_ID}) is False
        assert policy.delete_using(make_ctx(is_admin=True), {"id": USER_ID}) is True


# =============================================================================
# curriculum_modules / products
# =============================================================================

class TestCatalogRules:
    @pytest.mark.parametrize("published,expected", [(True, True), (False, False), (None, False)])
    def test_anonymous_sees_only_published(self, published, expected):
        ctx = make_ctx(user_id=None)
        assert policies.curriculum_visible(ctx, {"published": published}) is expected

    def test_admin_sees_drafts(self):
        assert policies.curriculum_visible(make_ctx(is_admin=True), {"published": False}) is True

    def test_products_readable_by_anyone(self):
        assert POLICIES["products"].select(make_ctx(user_id=None), {"name": "Kit"}) is True

    def test_catalog_writes_are_admin_only(self):
        for table in ("products", "curriculum_modules"):
            policy = POLICIES[table]
            assert policy.insert_check(make_ctx(), {}) is False
            assert policy.insert_check(make_ctx(is_admin=True), {}) is True


# =============================================================================
# orders / order_items
# =============================================================================

class TestOrderRules:
    def test_owner_and_admin_see_order(self):
        order = {"id": "o1", "user_id": USER_ID}
        assert policies.order_visible(make_ctx(), order) is True
        assert policies.order_visible(make_ctx(user_id=OTHER_ID), order) is False
        assert policies.order_visible(make_ctx(user_id=OTHER_ID, is_admin=True), order) is True

    def test_orphaned_order_visible_only_to_admin(self):
        order = {"id": "o1", "user_id": None}
        assert policies.order_visible(make_ctx(), order) is False
        assert policies.order_visible(make_ctx(is_admin=True), order) is True

    def test_any_authenticated_user_may_insert_order(self):
        assert policies.order_insert_allowed(make_ctx(), {}) is True
        assert policies.order_insert_allowed(make_ctx(user_id=None), {}) is False

    def test_customer_cannot_update_or_delete_orders(self):
        policy = POLICIES["orders"]
        order = {"id": "o1", "user_id": USER_ID}
        assert policy.update_using(make_ctx(), order) is False
        assert policy.delete_using(make_ctx(), order) is False

    def test_items_follow_parent_order(self):
        rows = {("orders", "o1"): {"id": "o1", "user_id": USER_ID}}
        item = {"id": 1, "order_id": "o1"}
        assert policies.order_item_visible(make_ctx(rows=rows), item) is True
        assert policies.order_item_visible(make_ctx(user_id=OTHER_ID, rows=rows), item) is False

    def test_item_with_missing_parent_is_hidden(self):
        item = {"id": 1, "order_id": "gone"}
        assert policies.order_item_visible(make_ctx(is_admin=True), item) is False

    def test_item_insert_requires_owning_parent(self):
        rows = {("orders", "o1"): {"id": "o1", "user_id": USER_ID}}
        item = {"order_id": "o1", "price": 10}
        assert policies.order_item_insert_allowed(make_ctx(rows=rows), item) is True
        assert policies.order_item_insert_allowed(make_ctx(user_id=OTHER_ID, rows=rows), item) is False
        assert policies.order_item_insert_allowed(
            make_ctx(user_id=OTHER_ID, is_admin=True, rows=rows), item
        ) is True


# =============================================================================
# analytics_events
# =============================================================================

class TestAnalyticsRules:
    def test_analytics_admin_only(self):
        policy = POLICIES["analytics_events"]
        event = {"id": 1, "user_id": USER_ID, "event_type": "view"}
        # Even the event's own user cannot read it
        assert policy.select(make_ctx(), event) is False
        assert policy.select(make_ctx(is_admin=True), event) is True
        assert policy.insert_check(make_ctx(), event) is False
