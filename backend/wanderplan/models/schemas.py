from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, EmailStr, Field, field_validator

from wanderplan.models.domain import (
    Activity,
    DayPlan,
    Itinerary,
    TripSummary,
    User,
    UserIdentity,
    UserSummary,
)

CostValue = Optional[Union[float, str]]


def _budget_to_str(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ActivitySchema(BaseModel):
    time: str = ""
    title: str
    description: str = ""
    location: Optional[str] = None
    duration: Optional[str] = None
    category: Optional[str] = None
    cost: CostValue = None

    @classmethod
    def from_domain(cls, obj: Activity) -> "ActivitySchema":
        return cls(
            time=obj.time,
            title=obj.title,
            description=obj.description,
            location=obj.location,
            duration=obj.duration,
            category=obj.category,
            cost=obj.cost,
        )

    def to_domain(self) -> Activity:
        return Activity(
            time=self.time,
            title=self.title,
            description=self.description,
            location=self.location,
            duration=self.duration,
            category=self.category,
            cost=self.cost,
        )


class DayPlanSchema(BaseModel):
    activities: List[ActivitySchema] = Field(default_factory=list)
    total_cost: CostValue = None
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, obj: DayPlan) -> "DayPlanSchema":
        return cls(
            activities=[ActivitySchema.from_domain(a) for a in obj.activities],
            total_cost=obj.total_cost,
            notes=obj.notes,
        )

    def to_domain(self) -> DayPlan:
        return DayPlan(
            activities=[a.to_domain() for a in self.activities],
            total_cost=self.total_cost,
            notes=self.notes,
        )


class TripSummarySchema(BaseModel):
    total_estimated_cost: CostValue = None
    highlights: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, obj: TripSummary) -> "TripSummarySchema":
        return cls(
            total_estimated_cost=obj.total_estimated_cost,
            highlights=list(obj.highlights),
            tips=list(obj.tips),
        )

    def to_domain(self) -> TripSummary:
        return TripSummary(
            total_estimated_cost=self.total_estimated_cost,
            highlights=list(self.highlights),
            tips=list(self.tips),
        )


class UserRefSchema(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_domain(cls, obj: UserIdentity) -> "UserRefSchema":
        if isinstance(obj, UserSummary):
            return cls(id=obj.user_id, name=obj.name, email=obj.email)
        return cls(id=obj.user_id)


class ItinerarySchema(BaseModel):
    id: str
    owner: UserRefSchema
    title: str
    destination: str
    total_days: int
    budget: str
    interests: List[str]
    days: List[DayPlanSchema]
    summary: TripSummarySchema
    collaborators: List[UserRefSchema]
    is_public: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, obj: Itinerary) -> "ItinerarySchema":
        return cls(
            id=obj.itinerary_id,
            owner=UserRefSchema.from_domain(obj.owner),
            title=obj.title,
            destination=obj.destination,
            total_days=obj.total_days,
            budget=obj.budget,
            interests=list(obj.interests),
            days=[DayPlanSchema.from_domain(d) for d in obj.days],
            summary=TripSummarySchema.from_domain(obj.summary),
            collaborators=[UserRefSchema.from_domain(c) for c in obj.collaborators],
            is_public=obj.is_public,
            created_at=obj.created_at,
            updated_at=obj.updated_at,
        )


class GenerateItineraryRequest(BaseModel):
    destination: Optional[str] = None
    days: Optional[int] = None
    budget: Optional[str] = None
    interests: List[str] = Field(default_factory=list)

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, value):
        return _budget_to_str(value)


class ItineraryCreateRequest(BaseModel):
    title: Optional[str] = None
    destination: str
    total_days: int = Field(..., ge=1)
    budget: str
    interests: List[str] = Field(default_factory=list)
    days: List[DayPlanSchema] = Field(default_factory=list)
    summary: Optional[TripSummarySchema] = None

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, value):
        return _budget_to_str(value)


class ItineraryUpdateRequest(BaseModel):
    title: Optional[str] = None
    destination: Optional[str] = None
    total_days: Optional[int] = Field(None, ge=1)
    budget: Optional[str] = None
    interests: Optional[List[str]] = None
    days: Optional[List[DayPlanSchema]] = None
    summary: Optional[TripSummarySchema] = None
    is_public: Optional[bool] = None

    @field_validator("budget", mode="before")
    @classmethod
    def coerce_budget(cls, value):
        return _budget_to_str(value)

    def to_fields(self) -> dict:
        """Domain-level values for the fields the caller actually sent."""
        fields = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "days":
                value = [d.to_domain() for d in value]
            elif name == "summary":
                value = value.to_domain()
            fields[name] = value
        return fields


class AddCollaboratorRequest(BaseModel):
    email: Optional[str] = None


class RemoveCollaboratorRequest(BaseModel):
    collaborator_id: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None


class UserSchema(BaseModel):
    id: str
    name: str
    email: str
    image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, obj: User) -> "UserSchema":
        return cls(
            id=obj.user_id,
            name=obj.name,
            email=obj.email,
            image=obj.image,
            created_at=obj.created_at,
            updated_at=obj.updated_at,
        )


class UserResponse(BaseModel):
    success: bool = True
    data: UserSchema


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    data: UserSchema


class ItineraryResponse(BaseModel):
    success: bool = True
    data: ItinerarySchema


class ItineraryListResponse(BaseModel):
    success: bool = True
    data: List[ItinerarySchema]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
