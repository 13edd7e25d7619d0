# =============================================================================
# lib/mongo_client.py - MongoDB Store Wrapper
# =============================================================================
# This module owns the single MongoDB connection used by the API.
#
# The store is created once in the FastAPI lifespan, injected into services
# through app.dependencies.get_store, and closed on shutdown. It also
# declares the unique indexes the services rely on for idempotent writes:
# - users.email
# - applications.transactionId
#
# Usage:
#   store = MongoStore.connect(settings.MONGODB_URI, settings.MONGODB_DB)
#   store.ensure_indexes()
#   store.users.find_one({"email": "a@x.com"})
#   store.close()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from app.exceptions import InvalidIdentifierError

# Set up logging for this module
logger = logging.getLogger(__name__)

USERS = "users"
SCHOLARSHIPS = "scholarships"
APPLICATIONS = "applications"
REVIEWS = "reviews"


class MongoStore:
    """
    Explicitly owned MongoDB connection plus typed collection accessors.

    Example:
        store = MongoStore.connect("mongodb://localhost:27017", "scholarStream")
        store.ensure_indexes()
        scholarship = store.scholarships.find_one({"_id": oid})
    """

    def __init__(self, client: MongoClient, db_name: str):
        self._client = client
        self._db: Database = client[db_name]

    @classmethod
    def connect(cls, uri: str, db_name: str, timeout_ms: int = 5000) -> "MongoStore":
        """
        Open a client with explicit timeouts so a stalled cluster surfaces
        as an error instead of a hung request.
        """
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        logger.info(f"MongoDB client initialized for database '{db_name}'")
        return cls(client, db_name)

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @property
    def db(self) -> Database:
        return self._db

    @property
    def users(self) -> Collection:
        return self._db[USERS]

    @property
    def scholarships(self) -> Collection:
        return self._db[SCHOLARSHIPS]

    @property
    def applications(self) -> Collection:
        return self._db[APPLICATIONS]

    @property
    def reviews(self) -> Collection:
        return self._db[REVIEWS]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def ensure_indexes(self) -> None:
        """
        Create the indexes the services depend on.

        The unique indexes are what make user registration and payment
        confirmation safe under concurrent retries.
        """
        self.users.create_index([("email", ASCENDING)], unique=True, name="uniq_email")
        self.applications.create_index(
            [("transactionId", ASCENDING)], unique=True, name="uniq_transaction"
        )
        self.applications.create_index([("userEmail", ASCENDING)], name="by_user_email")
        self.scholarships.create_index([("postDate", DESCENDING)], name="by_post_date")
        self.reviews.create_index([("scholarshipId", ASCENDING)], name="by_scholarship")
        self.reviews.create_index([("reviewerEmail", ASCENDING)], name="by_reviewer")
        logger.info("MongoDB indexes ensured")

    def ping(self) -> bool:
        """Round-trip to the server; raises PyMongoError when unreachable."""
        self._client.admin.command("ping")
        return True

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB client closed")


# =============================================================================
# Document helpers
# =============================================================================

def parse_object_id(value: str) -> ObjectId:
    """Convert a path/query identifier to ObjectId, raising a 400 on junk."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(str(value))


def serialize_document(document: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Make a MongoDB document JSON friendly.

    Top-level ObjectId values (`_id` and references) become strings;
    nested documents are returned unchanged.
    """
    if document is None:
        return None
    result: dict[str, Any] = {}
    for key, value in document.items():
        if isinstance(value, ObjectId):
            value = str(value)
        result[key] = value
    return result


def serialize_documents(documents) -> list[dict[str, Any]]:
    return [serialize_document(doc) for doc in documents]
