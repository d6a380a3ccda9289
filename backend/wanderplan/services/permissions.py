"""Access rules for itineraries.

Identities reach this module in several shapes: a bare id string, a
``UserRef``, a ``UserSummary`` carrying display fields, a raw store
document, or a store-native id object. Every comparison goes through
``identity_key`` so the shapes never get compared structurally.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict

from wanderplan.core.errors import NotFoundError
from wanderplan.models.domain import Itinerary, User, UserRef, UserSummary


class Operation(str, Enum):
    read = "read"
    mutate = "mutate"
    delete = "delete"
    administer = "administer"


_DENIED_MESSAGES = {
    Operation.read: "Itinerary not found",
    Operation.mutate: "Itinerary not found or you do not have permission",
    Operation.delete: "Itinerary not found or you do not have permission",
    Operation.administer: "Itinerary not found or you do not have permission",
}


def identity_key(value: Any) -> str:
    if isinstance(value, (UserRef, UserSummary, User)):
        return str(value.user_id).strip()
    if isinstance(value, Mapping):
        for key in ("_id", "id", "user_id"):
            if key in value:
                return identity_key(value[key])
        raise ValueError(f"No identifier in {value!r}")
    if value is None:
        raise ValueError("Identity is missing")
    # str, ObjectId and anything else with a canonical string form
    return str(value).strip()


def same_identity(left: Any, right: Any) -> bool:
    return identity_key(left) == identity_key(right)


def is_owner(identity: Any, itinerary: Itinerary) -> bool:
    return same_identity(identity, itinerary.owner)


def is_collaborator(identity: Any, itinerary: Itinerary) -> bool:
    key = identity_key(identity)
    return any(identity_key(c) == key for c in itinerary.collaborators)


def is_allowed(identity: Any, itinerary: Itinerary, operation: Operation) -> bool:
    if is_owner(identity, itinerary):
        return True
    if operation in (Operation.delete, Operation.administer):
        return False
    if is_collaborator(identity, itinerary):
        return True
    return operation == Operation.read and itinerary.is_public


def authorize(identity: Any, itinerary: Itinerary | None, operation: Operation) -> Itinerary:
    """Return the itinerary, or raise not-found if it is absent or denied."""
    if itinerary is None or not is_allowed(identity, itinerary, operation):
        raise NotFoundError(_DENIED_MESSAGES[operation])
    return itinerary


def list_filter(identity: Any) -> Dict[str, Any]:
    # Public itineraries are readable by id but never listed to strangers.
    key = identity_key(identity)
    return {"$or": [{"owner_id": key}, {"collaborators": key}]}
