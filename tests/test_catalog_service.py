# =============================================================================
# tests/test_catalog_service.py - Catalog Service Tests
# =============================================================================
# Covers catalog CRUD through the access rules, cache expiry on writes, and
# the degraded paths when the backend is unreachable.
# =============================================================================

import pytest

from app.exceptions import BackendUnavailableError, NoRowsAffectedError, RowNotFoundError
from core.models.curriculum import CurriculumModuleCreate, CurriculumModuleUpdate, code_snippet_from_assets, parse_assets
from core.models.product import ProductCreate, ProductUpdate
from core.services.catalog_service import FALLBACK_PRODUCTS, CatalogService
from core.services.gateway import DataGateway
from core.store import MemoryRowStore, StoreUnavailableError
from lib.cache import ReadThroughCache
from tests.conftest import ADMIN_ID, CUSTOMER_ID


class FlakyStore(MemoryRowStore):
    """Memory store whose reads fail while `down` is set."""

    def __init__(self):
        super().__init__()
        self.down = False
        self.selects = 0

    def select(self, *args, **kwargs):
        if self.down:
            raise StoreUnavailableError("connection refused")
        self.selects += 1
        return super().select(*args, **kwargs)


@pytest.fixture
def flaky_store():
    store = FlakyStore()
    store.insert("profiles", {"id": ADMIN_ID, "role": "admin"})
    store.insert("profiles", {"id": CUSTOMER_ID, "role": "customer"})
    return store


@pytest.fixture
def catalog(flaky_store):
    cache = ReadThroughCache(
        ttl_seconds=60,
        max_stale_seconds=3600,
        serve_stale_on=(StoreUnavailableError,),
    )
    return CatalogService(DataGateway(flaky_store), cache)


def module_data(**overrides):
    data = {"title": "Hover Basics", "grade": "Grade 9", "subject": "Physics"}
    data.update(overrides)
    return CurriculumModuleCreate(**data)


# =============================================================================
# Curriculum
# =============================================================================

class TestCurriculum:
    def test_admin_creates_module_with_inline_code(self, catalog, admin):
        created = catalog.create_curriculum(
            admin, module_data(code_snippet="drone.takeoff()", code_label="takeoff.py")
        )

        assets = parse_assets(created["asset_urls"])
        assert created["module"] == "Drone Module"
        assert assets[0].label == "takeoff.py"
        assert assets[0].url.startswith("data:text/plain;base64,")
        assert code_snippet_from_assets(assets) == "drone.takeoff()"

    def test_customer_cannot_create_module(self, catalog, customer):
        with pytest.raises(NoRowsAffectedError) as exc_info:
            catalog.create_curriculum(customer, module_data())
        assert exc_info.value.status_code == 403

    def test_public_listing_hides_drafts_even_from_admin(self, catalog, admin):
        catalog.create_curriculum(admin, module_data(title="Live"))
        catalog.create_curriculum(admin, module_data(title="Draft", published=False))

        assert [m["title"] for m in catalog.list_curriculum(admin)] == ["Live"]
        titles = {m["title"] for m in catalog.list_curriculum(admin, include_unpublished=True)}
        assert titles == {"Live", "Draft"}

    def test_include_unpublished_ignored_for_customers(self, catalog, admin, customer):
        catalog.create_curriculum(admin, module_data(title="Draft", published=False))
        assert catalog.list_curriculum(customer, include_unpublished=True) == []

    def test_grade_and_subject_filters(self, catalog, admin, anonymous):
        catalog.create_curriculum(admin, module_data(title="A", grade="Grade 9", subject="Physics"))
        catalog.create_curriculum(admin, module_data(title="B", grade="Grade 10", subject="Physics"))
        catalog.create_curriculum(admin, module_data(title="C", grade="Grade 9", subject="Mathematics"))

        rows = catalog.list_curriculum(anonymous, grade="Grade 9", subject="Physics")
        assert [r["title"] for r in rows] == ["A"]

    def test_writes_expire_public_listing(self, catalog, admin, anonymous):
        catalog.create_curriculum(admin, module_data(title="First"))
        assert len(catalog.list_curriculum(anonymous)) == 1

        catalog.create_curriculum(admin, module_data(title="Second"))
        assert len(catalog.list_curriculum(anonymous)) == 2

    def test_update_replaces_code_snippet(self, catalog, admin):
        created = catalog.create_curriculum(admin, module_data(code_snippet="old()"))

        updated = catalog.update_curriculum(
            admin, created["id"], CurriculumModuleUpdate(code_snippet="new()")
        )

        assert code_snippet_from_assets(parse_assets(updated["asset_urls"])) == "new()"
        assert len(updated["asset_urls"]) == 1

    def test_draft_is_not_found_for_customer(self, catalog, admin, customer):
        draft = catalog.create_curriculum(admin, module_data(published=False))
        with pytest.raises(RowNotFoundError):
            catalog.get_curriculum(customer, draft["id"])

    def test_customer_update_of_draft_looks_missing(self, catalog, admin, customer):
        draft = catalog.create_curriculum(admin, module_data(published=False))
        with pytest.raises(NoRowsAffectedError) as exc_info:
            catalog.update_curriculum(customer, draft["id"], CurriculumModuleUpdate(title="x"))
        assert exc_info.value.status_code == 404

    def test_delete(self, catalog, admin, anonymous):
        created = catalog.create_curriculum(admin, module_data())
        catalog.delete_curriculum(admin, created["id"])
        assert catalog.list_curriculum(anonymous) == []

    def test_backend_down_serves_cached_listing(self, catalog, flaky_store, admin, anonymous):
        created = catalog.create_curriculum(admin, module_data())
        catalog.list_curriculum(anonymous)
        catalog.cache.expire()

        flaky_store.down = True

        assert [m["id"] for m in catalog.list_curriculum(anonymous)] == [created["id"]]
        assert catalog.get_curriculum(anonymous, created["id"])["id"] == created["id"]

    def test_backend_down_without_cache_is_reported(self, catalog, flaky_store, anonymous):
        flaky_store.down = True
        with pytest.raises(BackendUnavailableError) as exc_info:
            catalog.list_curriculum(anonymous)
        assert exc_info.value.status_code == 503


# =============================================================================
# Products
# =============================================================================

class TestProducts:
    def test_admin_creates_and_anonymous_lists(self, catalog, admin, anonymous):
        catalog.create_product(admin, ProductCreate(name="Quad Kit", price=4999, featured=True))
        catalog.create_product(admin, ProductCreate(name="Spare Props", price=299))

        assert {p["name"] for p in catalog.list_products(anonymous)} == {"Quad Kit", "Spare Props"}
        assert [p["name"] for p in catalog.list_products(anonymous, featured=True)] == ["Quad Kit"]

    def test_customer_cannot_create_product(self, catalog, customer):
        with pytest.raises(NoRowsAffectedError):
            catalog.create_product(customer, ProductCreate(name="x", price=1))

    def test_listing_is_cached(self, catalog, flaky_store, admin, anonymous):
        catalog.create_product(admin, ProductCreate(name="Quad Kit", price=4999))
        catalog.list_products(anonymous)
        selects = flaky_store.selects

        catalog.list_products(anonymous)
        assert flaky_store.selects == selects

    def test_remove_image(self, catalog, admin):
        created = catalog.create_product(admin, ProductCreate(name="Kit", price=1, image_url="https://x/a.png"))
        updated = catalog.update_product(admin, created["id"], ProductUpdate(remove_image=True))
        assert updated["image_url"] is None

    def test_customer_delete_is_no_rows_affected(self, catalog, admin, customer):
        created = catalog.create_product(admin, ProductCreate(name="Kit", price=1))
        with pytest.raises(NoRowsAffectedError):
            catalog.delete_product(customer, created["id"])

    def test_backend_down_serves_stale_snapshot(self, catalog, flaky_store, admin, anonymous):
        catalog.create_product(admin, ProductCreate(name="Quad Kit", price=4999))
        catalog.list_products(anonymous)
        catalog.cache.expire()

        flaky_store.down = True
        names = [p["name"] for p in catalog.list_products(anonymous)]

        # Within max_stale the snapshot alone is served
        assert names == ["Quad Kit"]

    def test_backend_down_with_no_cache_serves_fallback(self, catalog, flaky_store, anonymous):
        flaky_store.down = True

        products = catalog.list_products(anonymous)

        assert [p["id"] for p in products] == [p["id"] for p in FALLBACK_PRODUCTS]
        assert catalog.get_product(anonymous, FALLBACK_PRODUCTS[0]["id"])["name"] == FALLBACK_PRODUCTS[0]["name"]

    def test_missing_product(self, catalog, anonymous, random_id):
        with pytest.raises(RowNotFoundError):
            catalog.get_product(anonymous, random_id)
