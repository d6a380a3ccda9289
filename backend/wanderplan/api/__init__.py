from typing import Optional

from fastapi import Depends, Header, HTTPException
from starlette.requests import Request

from wanderplan.core.errors import UnauthorizedError
from wanderplan.core.security import decode_access_token
from wanderplan.llm.client import GenerationClient
from wanderplan.models.domain import User
from wanderplan.storage.repository import Repository


def get_repository(request: Request) -> Repository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(status_code=500, detail="Repository not initialized")
    return repository


def get_generation_client(request: Request) -> GenerationClient:
    client = getattr(request.app.state, "generation_client", None)
    if client is None:
        raise HTTPException(status_code=500, detail="Generation client not initialized")
    return client


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    repository: Repository = Depends(get_repository),
) -> User:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError()
    user = repository.get_user(decode_access_token(token.strip()))
    if user is None:
        raise UnauthorizedError()
    return user
