# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Backs the MongoStore with mongomock (in-memory MongoDB API)
# - Replaces the Stripe gateway with a MagicMock
# - Wires both into the app through dependency_overrides
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB", "scholarstream_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-scholarstream")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("CLIENT_URL", "http://localhost:5173")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timezone
from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.auth.tokens import issue_token
from app.dependencies import get_payment_gateway, get_store
from app.main import app
from lib.mongo_client import MongoStore
from lib.stripe_client import CheckoutSession, StripeGateway


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Fresh in-memory store with the production indexes."""
    mongo_store = MongoStore(mongomock.MongoClient(), "scholarstream_test")
    mongo_store.ensure_indexes()
    return mongo_store


@pytest.fixture
def gateway():
    """Stripe gateway stand-in; tests set return values per scenario."""
    fake = MagicMock(spec=StripeGateway)
    fake.create_checkout_session.return_value = CheckoutSession(
        id="cs_test_123",
        url="https://checkout.stripe.com/c/pay/cs_test_123",
    )
    return fake


@pytest.fixture
def client(store, gateway):
    """TestClient with the store and gateway injected."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_user(store):
    """Insert a user with a given role and return its id."""

    def _add_user(email: str, role: str = "student", name: str | None = None) -> str:
        result = store.users.insert_one(
            {
                "email": email,
                "name": name or email.split("@")[0],
                "role": role,
                "createdAt": datetime.now(timezone.utc),
            }
        )
        return str(result.inserted_id)

    return _add_user


@pytest.fixture
def auth_headers():
    """Build an Authorization header for an email."""

    def _auth_headers(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(email)}"}

    return _auth_headers


@pytest.fixture
def sample_scholarship_dict():
    """Sample scholarship payload for testing."""
    return {
        "scholarshipName": "Global Excellence Award",
        "universityName": "Engineering Institute",
        "universityCountry": "Germany",
        "universityCity": "Munich",
        "universityWorldRank": 42,
        "subjectCategory": "Engineering",
        "scholarshipCategory": "Full fund",
        "degree": "Masters",
        "applicationFees": 50,
        "serviceCharge": 10,
        "description": "Covers tuition and living costs for two years.",
    }


@pytest.fixture
def add_scholarship(store, sample_scholarship_dict):
    """Insert a scholarship (overrides merged over the sample) and return its id."""

    def _add_scholarship(**overrides) -> str:
        document = {**sample_scholarship_dict, **overrides}
        document.setdefault("postDate", datetime(2024, 1, 1, tzinfo=timezone.utc))
        return str(store.scholarships.insert_one(document).inserted_id)

    return _add_scholarship
