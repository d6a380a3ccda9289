from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

Cost = Union[float, str, None]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    user_id: str
    name: str
    email: str
    password_hash: str
    image: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class UserRef:
    """A user known only by identifier."""

    user_id: str


@dataclass(frozen=True)
class UserSummary:
    """A user reference expanded with display fields."""

    user_id: str
    name: str
    email: str


UserIdentity = Union[UserRef, UserSummary]


@dataclass
class Activity:
    time: str
    title: str
    description: str
    location: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    cost: Cost = None


@dataclass
class DayPlan:
    activities: List[Activity] = field(default_factory=list)
    total_cost: Cost = None
    notes: Optional[str] = None


@dataclass
class TripSummary:
    total_estimated_cost: Cost = None
    highlights: List[str] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)


@dataclass
class Itinerary:
    itinerary_id: str
    owner: UserIdentity
    title: str
    destination: str
    total_days: int
    budget: str
    interests: List[str] = field(default_factory=list)
    days: List[DayPlan] = field(default_factory=list)
    summary: TripSummary = field(default_factory=TripSummary)
    collaborators: List[UserIdentity] = field(default_factory=list)
    is_public: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
