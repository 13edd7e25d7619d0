# =============================================================================
# core/services/user_service.py - Identity Store
# =============================================================================
# Reads and writes user records (email, role) in the `users` collection.
# Also serves as the identity lookup used by the role guard.
# =============================================================================

import logging
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import UserNotFoundError
from core.models.user import UserCreate, UserRole
from lib.mongo_client import MongoStore, parse_object_id, serialize_document, serialize_documents
from lib.utils import normalize_email, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user registration and role management.

    Registration is an atomic insert-if-absent on the unique email index,
    so a duplicate submission never produces a second record.
    """

    def __init__(self, store: MongoStore):
        self._users = store.users

    def register(self, user: UserCreate) -> tuple[str | None, bool]:
        """
        Register a user if the email is new.

        Returns:
            (inserted_id, True) on creation, (None, False) if the email exists
        """
        email = normalize_email(user.email)
        document = {
            "name": user.name,
            "photoURL": user.photoURL,
            "role": UserRole.STUDENT.value,
            "createdAt": utcnow(),
        }

        try:
            result = self._users.update_one(
                {"email": email},
                {"$setOnInsert": document},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent registration for the same email got there first
            logger.info(f"User already exists (concurrent insert): {email}")
            return None, False

        if result.upserted_id is None:
            logger.info(f"User already exists: {email}")
            return None, False

        logger.info(f"Registered user {email}")
        return str(result.upserted_id), True

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        return serialize_document(self._users.find_one({"email": normalize_email(email)}))

    def get_role(self, email: str) -> UserRole | None:
        """Single lookup used by the role guard."""
        user = self._users.find_one({"email": normalize_email(email)}, {"role": 1})
        if not user or user.get("role") not in UserRole._value2member_map_:
            return None
        return UserRole(user["role"])

    def get_id(self, email: str) -> str:
        user = self._users.find_one({"email": normalize_email(email)}, {"_id": 1})
        if not user:
            raise UserNotFoundError(email)
        return str(user["_id"])

    def list_users(self, role: UserRole | None = None) -> list[dict[str, Any]]:
        query = {"role": role.value} if role else {}
        return serialize_documents(self._users.find(query).sort("createdAt", -1))

    def set_role(self, user_id: str, role: UserRole) -> dict[str, Any]:
        updated = self._users.find_one_and_update(
            {"_id": parse_object_id(user_id)},
            {"$set": {"role": role.value}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise UserNotFoundError(user_id)
        logger.info(f"User {updated['email']} role set to {role.value}")
        return serialize_document(updated)

    def delete(self, user_id: str) -> None:
        result = self._users.delete_one({"_id": parse_object_id(user_id)})
        if result.deleted_count == 0:
            raise UserNotFoundError(user_id)
        logger.info(f"Deleted user {user_id}")
