from fastapi import APIRouter, Depends

from wanderplan.api import get_repository
from wanderplan.core.security import create_access_token
from wanderplan.models.schemas import AuthResponse, LoginRequest, RegisterRequest, UserSchema
from wanderplan.services.user_service import UserService
from wanderplan.storage.repository import Repository

router = APIRouter()


def get_user_service(repository: Repository = Depends(get_repository)) -> UserService:
    return UserService(repository=repository)


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, service: UserService = Depends(get_user_service)) -> AuthResponse:
    user = service.register(name=payload.name, email=payload.email, password=payload.password)
    return AuthResponse(token=create_access_token(user.user_id), data=UserSchema.from_domain(user))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, service: UserService = Depends(get_user_service)) -> AuthResponse:
    user = service.authenticate(email=payload.email, password=payload.password)
    return AuthResponse(token=create_access_token(user.user_id), data=UserSchema.from_domain(user))
