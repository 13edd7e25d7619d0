# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable infrastructure wrappers:
# - mongo_client.py: Owned MongoDB connection, collections and indexes
# - stripe_client.py: Stripe hosted checkout wrapper
# - utils.py: Shared utilities (email normalization, time, money)
# =============================================================================

from lib.mongo_client import MongoStore, parse_object_id, serialize_document, serialize_documents
from lib.stripe_client import CheckoutSession, StripeGateway
from lib.utils import normalize_email, to_cents, utcnow

__all__ = [
    # MongoDB
    "MongoStore",
    "parse_object_id",
    "serialize_document",
    "serialize_documents",
    # Stripe
    "CheckoutSession",
    "StripeGateway",
    # Utils
    "normalize_email",
    "to_cents",
    "utcnow",
]
