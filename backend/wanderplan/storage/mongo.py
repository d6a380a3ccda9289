"""MongoDB-backed repository.

The client is process-wide: it is created on first use, guarded by a lock
so concurrent first requests cannot create two, and reused afterwards.
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError, ServerSelectionTimeoutError

from wanderplan.core.errors import BadRequestError, StoreError
from wanderplan.models.domain import Itinerary, User, utcnow
from wanderplan.storage.documents import (
    encode_value,
    itinerary_from_document,
    itinerary_to_document,
    user_from_document,
    user_to_document,
)

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None
_client_lock = threading.Lock()


def get_mongo_client(uri: str, timeout_ms: int = 5000) -> MongoClient:
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                logger.info("Creating MongoDB client")
                _client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
    return _client


def describe_store_error(exc: PyMongoError) -> str:
    message = str(exc)
    lowered = message.lower()
    if isinstance(exc, OperationFailure) and ("authentication failed" in lowered or "bad auth" in lowered):
        return (
            "Database connection failed. Authentication failed. Please check:\n"
            "1. Your MongoDB username is correct\n"
            "2. Your MongoDB password is correct\n"
            "3. The password is URL-encoded if it contains special characters\n"
            "4. Your database user has proper permissions"
        )
    if isinstance(exc, ServerSelectionTimeoutError) or "getaddrinfo" in lowered or "whitelist" in lowered:
        return (
            "Database connection failed. Cannot connect to MongoDB server. "
            "Your IP address may not be allowed by the cluster's network access list.\n"
            "1. Open your MongoDB provider's network access settings\n"
            "2. Add the IP address this server connects from\n"
            "3. Wait a minute or two and try again"
        )
    return f"Database error: {message}"


def _translate_errors(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except PyMongoError as exc:
            logger.error("MongoDB call %s failed: %s", method.__name__, exc)
            raise StoreError(describe_store_error(exc)) from exc

    return wrapper


class MongoRepository:
    def __init__(self, uri: str, db_name: str, timeout_ms: int = 5000) -> None:
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self._db: Optional[Database] = None
        self._init_lock = threading.Lock()

    @property
    def db(self) -> Database:
        if self._db is None:
            with self._init_lock:
                if self._db is None:
                    db = get_mongo_client(self.uri, self.timeout_ms)[self.db_name]
                    db["users"].create_index([("email", ASCENDING)], unique=True)
                    db["itineraries"].create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
                    db["itineraries"].create_index([("collaborators", ASCENDING)])
                    self._db = db
        return self._db

    # users

    @_translate_errors
    def insert_user(self, user: User) -> User:
        try:
            self.db["users"].insert_one(user_to_document(user))
        except DuplicateKeyError as exc:
            raise BadRequestError("Email already registered") from exc
        return user

    @_translate_errors
    def get_user(self, user_id: str) -> Optional[User]:
        doc = self.db["users"].find_one({"_id": user_id})
        return user_from_document(doc) if doc else None

    @_translate_errors
    def get_user_by_email(self, email: str) -> Optional[User]:
        doc = self.db["users"].find_one({"email": email.strip().lower()})
        return user_from_document(doc) if doc else None

    @_translate_errors
    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ids = list(user_ids)
        if not ids:
            return {}
        users = (user_from_document(d) for d in self.db["users"].find({"_id": {"$in": ids}}))
        return {u.user_id: u for u in users}

    @_translate_errors
    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        doc = self.db["users"].find_one_and_update(
            {"_id": user_id},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return user_from_document(doc) if doc else None

    # itineraries

    @_translate_errors
    def insert_itinerary(self, itinerary: Itinerary) -> Itinerary:
        doc = itinerary_to_document(itinerary)
        self.db["itineraries"].insert_one(doc)
        return itinerary_from_document(doc)

    @_translate_errors
    def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        doc = self.db["itineraries"].find_one({"_id": itinerary_id})
        return itinerary_from_document(doc) if doc else None

    @_translate_errors
    def find_itineraries(self, query: Dict[str, Any]) -> List[Itinerary]:
        cursor = self.db["itineraries"].find(query).sort("created_at", DESCENDING)
        return [itinerary_from_document(d) for d in cursor]

    def _find_one_and_update(self, itinerary_id: str, update: Dict[str, Any]) -> Optional[Itinerary]:
        update.setdefault("$set", {})["updated_at"] = utcnow()
        doc = self.db["itineraries"].find_one_and_update(
            {"_id": itinerary_id}, update, return_document=ReturnDocument.AFTER
        )
        return itinerary_from_document(doc) if doc else None

    @_translate_errors
    def update_itinerary(self, itinerary_id: str, fields: Dict[str, Any]) -> Optional[Itinerary]:
        encoded = {name: encode_value(name, value) for name, value in fields.items()}
        return self._find_one_and_update(itinerary_id, {"$set": encoded})

    @_translate_errors
    def add_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        return self._find_one_and_update(itinerary_id, {"$addToSet": {"collaborators": user_id}})

    @_translate_errors
    def remove_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        return self._find_one_and_update(itinerary_id, {"$pull": {"collaborators": user_id}})

    @_translate_errors
    def delete_itinerary(self, itinerary_id: str) -> bool:
        return self.db["itineraries"].delete_one({"_id": itinerary_id}).deleted_count == 1
