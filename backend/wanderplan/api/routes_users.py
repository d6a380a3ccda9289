from fastapi import APIRouter, Depends

from wanderplan.api import get_current_user
from wanderplan.api.routes_auth import get_user_service
from wanderplan.models.domain import User
from wanderplan.models.schemas import ProfileUpdateRequest, UserResponse, UserSchema
from wanderplan.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(data=UserSchema.from_domain(user))


@router.put("/me", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    updated = service.update_profile(user, name=payload.name, image=payload.image)
    return UserResponse(data=UserSchema.from_domain(updated))
