import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional
from uuid import uuid4

from wanderplan.core.errors import BadRequestError, NotFoundError
from wanderplan.llm.client import GenerationClient, GenerationRequest
from wanderplan.llm.ingestion import ingest, itinerary_title
from wanderplan.models.domain import Itinerary, TripSummary, User, UserIdentity, UserRef, UserSummary
from wanderplan.models.schemas import GenerateItineraryRequest, ItineraryCreateRequest
from wanderplan.services.permissions import Operation, authorize, identity_key, list_filter
from wanderplan.storage.repository import Repository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"title", "destination", "total_days", "budget", "interests", "days", "summary", "is_public"}
)


def expand_itineraries(repository: Repository, itineraries: List[Itinerary]) -> List[Itinerary]:
    """Resolve owner and collaborator references to name and email."""
    ids = set()
    for itinerary in itineraries:
        ids.add(identity_key(itinerary.owner))
        ids.update(identity_key(c) for c in itinerary.collaborators)
    users = repository.get_users(ids)

    def expand(ref: UserIdentity) -> UserIdentity:
        user = users.get(identity_key(ref))
        if user is None:
            return UserRef(identity_key(ref))
        return UserSummary(user_id=user.user_id, name=user.name, email=user.email)

    return [
        replace(i, owner=expand(i.owner), collaborators=[expand(c) for c in i.collaborators])
        for i in itineraries
    ]


def expand_itinerary(repository: Repository, itinerary: Itinerary) -> Itinerary:
    return expand_itineraries(repository, [itinerary])[0]


class ItineraryService:
    def __init__(self, repository: Repository, generation_client: Optional[GenerationClient] = None):
        self.repository = repository
        self.generation_client = generation_client

    def generate(self, user: User, request: GenerateItineraryRequest) -> Itinerary:
        if not request.destination or not request.days or not request.budget:
            raise BadRequestError("Please provide destination, days, and budget")
        if request.days < 1:
            raise BadRequestError("Days must be a positive number")
        if self.generation_client is None:
            raise RuntimeError("ItineraryService was built without a generation client")

        generation_request = GenerationRequest(
            destination=request.destination.strip(),
            days=request.days,
            budget=request.budget.strip(),
            interests=list(request.interests),
        )
        raw = self.generation_client.generate(generation_request)
        logger.debug("Received itinerary text (first 500 chars): %s", raw[:500])
        itinerary = ingest(raw, generation_request, owner_id=user.user_id)
        saved = self.repository.insert_itinerary(itinerary)
        logger.info("Created itinerary %s for user %s", saved.itinerary_id, user.user_id)
        return expand_itinerary(self.repository, saved)

    def create(self, user: User, payload: ItineraryCreateRequest) -> Itinerary:
        itinerary = Itinerary(
            itinerary_id=uuid4().hex,
            owner=UserRef(user.user_id),
            title=payload.title or itinerary_title(payload.destination, payload.total_days),
            destination=payload.destination,
            total_days=payload.total_days,
            budget=payload.budget,
            interests=list(payload.interests),
            days=[d.to_domain() for d in payload.days],
            summary=payload.summary.to_domain()
            if payload.summary
            else TripSummary(total_estimated_cost=payload.budget),
            collaborators=[],
            is_public=False,
        )
        saved = self.repository.insert_itinerary(itinerary)
        return expand_itinerary(self.repository, saved)

    def list_for(self, user: User) -> List[Itinerary]:
        itineraries = self.repository.find_itineraries(list_filter(user))
        return expand_itineraries(self.repository, itineraries)

    def get(self, user: User, itinerary_id: str) -> Itinerary:
        itinerary = authorize(user, self.repository.get_itinerary(itinerary_id), Operation.read)
        return expand_itinerary(self.repository, itinerary)

    def update(self, user: User, itinerary_id: str, fields: Dict[str, Any]) -> Itinerary:
        authorize(user, self.repository.get_itinerary(itinerary_id), Operation.mutate)
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise BadRequestError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        updated = self.repository.update_itinerary(itinerary_id, fields)
        if updated is None:
            raise NotFoundError("Itinerary not found")
        return expand_itinerary(self.repository, updated)

    def delete(self, user: User, itinerary_id: str) -> None:
        authorize(user, self.repository.get_itinerary(itinerary_id), Operation.delete)
        self.repository.delete_itinerary(itinerary_id)
        logger.info("Deleted itinerary %s", itinerary_id)
