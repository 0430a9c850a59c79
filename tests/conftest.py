# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Seeds an in-memory row store with an admin and two customers
# - Issues HS256 access tokens signed like Supabase's
# =============================================================================

import os
import time
import uuid

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("DATA_BACKEND", "memory")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from jose import jwt

from core.access import Requester
from core.services.gateway import DataGateway
from core.store import MemoryRowStore

TEST_JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]

ADMIN_ID = "11111111-1111-4111-8111-111111111111"
CUSTOMER_ID = "22222222-2222-4222-8222-222222222222"
OTHER_CUSTOMER_ID = "33333333-3333-4333-8333-333333333333"


def make_token(
    user_id: str,
    email: str | None = "user@example.com",
    expires_in: int = 3600,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """Build a Supabase-style HS256 access token."""
    now = int(time.time())
    claims = {
        "sub": user_id,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory row store."""
    return MemoryRowStore()


@pytest.fixture
def seeded_store(store):
    """Store with one admin and two customer profiles."""
    store.insert("profiles", {"id": ADMIN_ID, "full_name": "Admin", "role": "admin"})
    store.insert("profiles", {"id": CUSTOMER_ID, "full_name": "Asha", "role": "customer"})
    store.insert("profiles", {"id": OTHER_CUSTOMER_ID, "full_name": "Ravi", "role": "customer"})
    return store


@pytest.fixture
def gateway(seeded_store):
    return DataGateway(seeded_store)


@pytest.fixture
def admin():
    return Requester.for_user(ADMIN_ID)


@pytest.fixture
def customer():
    return Requester.for_user(CUSTOMER_ID)


@pytest.fixture
def other_customer():
    return Requester.for_user(OTHER_CUSTOMER_ID)


@pytest.fixture
def anonymous():
    return Requester.anonymous()


@pytest.fixture
def product(seeded_store):
    """A product inserted directly into the store."""
    return seeded_store.insert(
        "products",
        {"name": "Skylab Quad Kit", "price": 4999.5, "stock": 10, "featured": True},
    )


@pytest.fixture
def published_module(seeded_store):
    return seeded_store.insert(
        "curriculum_modules",
        {
            "title": "Hover Basics",
            "grade": "Grade 9",
            "subject": "Physics",
            "module": "Drone Module",
            "published": True,
        },
    )


@pytest.fixture
def draft_module(seeded_store):
    return seeded_store.insert(
        "curriculum_modules",
        {
            "title": "PID Tuning",
            "grade": "Grade 11",
            "subject": "Computer Science",
            "module": "Drone Module",
            "published": False,
        },
    )


@pytest.fixture
def random_id():
    return str(uuid.uuid4())
