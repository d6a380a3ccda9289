from typing import Optional

from fastapi import APIRouter, Depends

from wanderplan.api import get_current_user, get_repository
from wanderplan.models.domain import User
from wanderplan.models.schemas import (
    AddCollaboratorRequest,
    ItineraryResponse,
    ItinerarySchema,
    RemoveCollaboratorRequest,
)
from wanderplan.services.collaboration_service import CollaborationService
from wanderplan.storage.repository import Repository

router = APIRouter()


def get_collaboration_service(repository: Repository = Depends(get_repository)) -> CollaborationService:
    return CollaborationService(repository=repository)


@router.post("/{itinerary_id}/collaborate", response_model=ItineraryResponse)
def add_collaborator(
    itinerary_id: str,
    payload: Optional[AddCollaboratorRequest] = None,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
) -> ItineraryResponse:
    itinerary = service.add(user, itinerary_id, payload.email if payload else "")
    return ItineraryResponse(data=ItinerarySchema.from_domain(itinerary))


@router.delete("/{itinerary_id}/collaborate", response_model=ItineraryResponse)
def remove_collaborator(
    itinerary_id: str,
    payload: Optional[RemoveCollaboratorRequest] = None,
    user: User = Depends(get_current_user),
    service: CollaborationService = Depends(get_collaboration_service),
) -> ItineraryResponse:
    itinerary = service.remove(user, itinerary_id, payload.collaborator_id if payload else "")
    return ItineraryResponse(data=ItinerarySchema.from_domain(itinerary))
