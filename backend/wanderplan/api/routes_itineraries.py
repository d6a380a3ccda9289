import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from wanderplan.api import get_current_user, get_generation_client, get_repository
from wanderplan.core.errors import AppError, with_remediation
from wanderplan.llm.client import GenerationClient
from wanderplan.models.domain import User
from wanderplan.models.schemas import (
    GenerateItineraryRequest,
    ItineraryCreateRequest,
    ItineraryListResponse,
    ItineraryResponse,
    ItinerarySchema,
    ItineraryUpdateRequest,
    MessageResponse,
)
from wanderplan.services.export_service import pdf_filename, render_itinerary_pdf
from wanderplan.services.itinerary_service import ItineraryService
from wanderplan.storage.repository import Repository

logger = logging.getLogger(__name__)

router = APIRouter()


def get_itinerary_service(
    repository: Repository = Depends(get_repository),
    generation_client: GenerationClient = Depends(get_generation_client),
) -> ItineraryService:
    return ItineraryService(repository=repository, generation_client=generation_client)


@router.post("/generate", response_model=ItineraryResponse, status_code=201)
def generate_itinerary(
    payload: GenerateItineraryRequest,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    try:
        itinerary = service.generate(user, payload)
    except AppError as exc:
        if exc.status_code >= 500:
            logger.error("Itinerary generation failed: %s", exc.message)
            exc.message = with_remediation(exc.message)
        raise
    return ItineraryResponse(data=ItinerarySchema.from_domain(itinerary))


@router.get("", response_model=ItineraryListResponse)
def list_itineraries(
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryListResponse:
    itineraries = service.list_for(user)
    return ItineraryListResponse(data=[ItinerarySchema.from_domain(i) for i in itineraries])


@router.post("", response_model=ItineraryResponse, status_code=201)
def create_itinerary(
    payload: ItineraryCreateRequest,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return ItineraryResponse(data=ItinerarySchema.from_domain(service.create(user, payload)))


@router.get("/{itinerary_id}", response_model=ItineraryResponse)
def get_itinerary(
    itinerary_id: str,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return ItineraryResponse(data=ItinerarySchema.from_domain(service.get(user, itinerary_id)))


@router.put("/{itinerary_id}", response_model=ItineraryResponse)
def update_itinerary(
    itinerary_id: str,
    payload: ItineraryUpdateRequest,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    itinerary = service.update(user, itinerary_id, payload.to_fields())
    return ItineraryResponse(data=ItinerarySchema.from_domain(itinerary))


@router.delete("/{itinerary_id}", response_model=MessageResponse)
def delete_itinerary(
    itinerary_id: str,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> MessageResponse:
    service.delete(user, itinerary_id)
    return MessageResponse(message="Itinerary deleted successfully")


@router.get("/{itinerary_id}/pdf")
def download_itinerary_pdf(
    itinerary_id: str,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> Response:
    itinerary = service.get(user, itinerary_id)
    return Response(
        content=render_itinerary_pdf(itinerary),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(itinerary)}"'},
    )
