from __future__ import annotations

import copy
import threading
from typing import Any, Dict, Iterable, List, Optional, Protocol

from wanderplan.core.errors import BadRequestError
from wanderplan.models.domain import Itinerary, User, utcnow
from wanderplan.storage.documents import (
    encode_value,
    itinerary_from_document,
    itinerary_to_document,
    user_from_document,
    user_to_document,
)


class Repository(Protocol):
    def insert_user(self, user: User) -> User:
        ...

    def get_user(self, user_id: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ...

    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        ...

    def insert_itinerary(self, itinerary: Itinerary) -> Itinerary:
        ...

    def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        ...

    def find_itineraries(self, query: Dict[str, Any]) -> List[Itinerary]:
        ...

    def update_itinerary(self, itinerary_id: str, fields: Dict[str, Any]) -> Optional[Itinerary]:
        ...

    def add_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        ...

    def remove_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        ...

    def delete_itinerary(self, itinerary_id: str) -> bool:
        ...


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate the subset of document-store filters the services use:
    ``$or`` plus equality, where equality against a list field means
    membership."""
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(doc, clause) for clause in expected):
                return False
            continue
        actual = doc.get(key)
        if isinstance(actual, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryRepository:
    """Dict-backed store holding the same documents MongoRepository writes."""

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {}
        self.itineraries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    # users

    def insert_user(self, user: User) -> User:
        with self._lock:
            if any(u["email"] == user.email for u in self.users.values()):
                raise BadRequestError("Email already registered")
            self.users[user.user_id] = user_to_document(user)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            doc = self.users.get(user_id)
            return user_from_document(doc) if doc else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        normalized = email.strip().lower()
        with self._lock:
            for doc in self.users.values():
                if doc["email"] == normalized:
                    return user_from_document(doc)
        return None

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        found = {}
        with self._lock:
            for user_id in user_ids:
                doc = self.users.get(user_id)
                if doc:
                    found[user_id] = user_from_document(doc)
        return found

    def update_user(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        with self._lock:
            doc = self.users.get(user_id)
            if doc is None:
                return None
            doc.update(fields)
            doc["updated_at"] = utcnow()
            return user_from_document(doc)

    # itineraries

    def insert_itinerary(self, itinerary: Itinerary) -> Itinerary:
        doc = itinerary_to_document(itinerary)
        with self._lock:
            self.itineraries[itinerary.itinerary_id] = doc
        return itinerary_from_document(copy.deepcopy(doc))

    def get_itinerary(self, itinerary_id: str) -> Optional[Itinerary]:
        with self._lock:
            doc = copy.deepcopy(self.itineraries.get(itinerary_id))
        return itinerary_from_document(doc) if doc else None

    def find_itineraries(self, query: Dict[str, Any]) -> List[Itinerary]:
        with self._lock:
            docs = [copy.deepcopy(d) for d in self.itineraries.values() if _matches(d, query)]
        docs.sort(key=lambda d: d["created_at"], reverse=True)
        return [itinerary_from_document(d) for d in docs]

    def update_itinerary(self, itinerary_id: str, fields: Dict[str, Any]) -> Optional[Itinerary]:
        encoded = {name: encode_value(name, value) for name, value in fields.items()}
        with self._lock:
            doc = self.itineraries.get(itinerary_id)
            if doc is None:
                return None
            doc.update(encoded)
            doc["updated_at"] = utcnow()
            return itinerary_from_document(copy.deepcopy(doc))

    def add_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        with self._lock:
            doc = self.itineraries.get(itinerary_id)
            if doc is None:
                return None
            if user_id not in doc["collaborators"]:
                doc["collaborators"].append(user_id)
            doc["updated_at"] = utcnow()
            return itinerary_from_document(copy.deepcopy(doc))

    def remove_collaborator(self, itinerary_id: str, user_id: str) -> Optional[Itinerary]:
        with self._lock:
            doc = self.itineraries.get(itinerary_id)
            if doc is None:
                return None
            doc["collaborators"] = [c for c in doc["collaborators"] if c != user_id]
            doc["updated_at"] = utcnow()
            return itinerary_from_document(copy.deepcopy(doc))

    def delete_itinerary(self, itinerary_id: str) -> bool:
        with self._lock:
            return self.itineraries.pop(itinerary_id, None) is not None
