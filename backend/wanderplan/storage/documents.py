"""Conversion between domain records and stored documents.

Documents use snake_case keys and keep references as plain identifier
strings; expansion to display fields happens in the service layer.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from wanderplan.models.domain import (
    Activity,
    DayPlan,
    Itinerary,
    TripSummary,
    User,
    UserRef,
)
from wanderplan.services.permissions import identity_key


def user_to_document(user: User) -> Dict[str, Any]:
    return {
        "_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "password_hash": user.password_hash,
        "image": user.image,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def user_from_document(doc: Dict[str, Any]) -> User:
    return User(
        user_id=identity_key(doc["_id"]),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        password_hash=doc.get("password_hash", ""),
        image=doc.get("image"),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def encode_value(name: str, value: Any) -> Any:
    """Encode a single itinerary field for a partial update."""
    if name == "days":
        return [asdict(day) for day in value]
    if name == "summary":
        return asdict(value)
    if name in ("owner", "collaborators"):
        raise ValueError(f"{name} cannot be written through a field update")
    return value


def itinerary_to_document(itinerary: Itinerary) -> Dict[str, Any]:
    return {
        "_id": itinerary.itinerary_id,
        "owner_id": identity_key(itinerary.owner),
        "title": itinerary.title,
        "destination": itinerary.destination,
        "total_days": itinerary.total_days,
        "budget": itinerary.budget,
        "interests": list(itinerary.interests),
        "days": encode_value("days", itinerary.days),
        "summary": encode_value("summary", itinerary.summary),
        "collaborators": [identity_key(c) for c in itinerary.collaborators],
        "is_public": itinerary.is_public,
        "created_at": itinerary.created_at,
        "updated_at": itinerary.updated_at,
    }


def _activity_from_document(doc: Dict[str, Any]) -> Activity:
    return Activity(
        time=doc.get("time", ""),
        title=doc.get("title", ""),
        description=doc.get("description", ""),
        location=doc.get("location"),
        duration=doc.get("duration"),
        category=doc.get("category"),
        cost=doc.get("cost"),
    )


def _days_from_document(docs: List[Dict[str, Any]]) -> List[DayPlan]:
    return [
        DayPlan(
            activities=[_activity_from_document(a) for a in day.get("activities", [])],
            total_cost=day.get("total_cost"),
            notes=day.get("notes"),
        )
        for day in docs
    ]


def itinerary_from_document(doc: Dict[str, Any]) -> Itinerary:
    summary = doc.get("summary") or {}
    return Itinerary(
        itinerary_id=identity_key(doc["_id"]),
        owner=UserRef(identity_key(doc["owner_id"])),
        title=doc.get("title", ""),
        destination=doc.get("destination", ""),
        total_days=int(doc.get("total_days", 0)),
        budget=doc.get("budget", ""),
        interests=list(doc.get("interests", [])),
        days=_days_from_document(doc.get("days", [])),
        summary=TripSummary(
            total_estimated_cost=summary.get("total_estimated_cost"),
            highlights=list(summary.get("highlights", [])),
            tips=list(summary.get("tips", [])),
        ),
        collaborators=[UserRef(identity_key(c)) for c in doc.get("collaborators", [])],
        is_public=bool(doc.get("is_public", False)),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )
