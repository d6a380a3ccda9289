import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from wanderplan.api import routes_auth, routes_collaborators, routes_health, routes_itineraries, routes_users
from wanderplan.core.config import Settings, settings as default_settings
from wanderplan.core.errors import AppError
from wanderplan.core.logging import configure_logging
from wanderplan.llm.client import GenerationClient
from wanderplan.llm.factory import build_generation_client
from wanderplan.storage.mongo import MongoRepository
from wanderplan.storage.repository import InMemoryRepository, Repository

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> Repository:
    if settings.storage_backend.lower() == "mongo":
        return MongoRepository(settings.mongodb_uri, settings.mongodb_db, settings.mongodb_timeout_ms)
    logger.warning("Using in-memory storage; data is lost on restart")
    return InMemoryRepository()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
        )
        return _error_response(400, f"Invalid request: {problems}")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error. Please try again.")


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    generation_client: Optional[GenerationClient] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_auth.router, prefix="/auth", tags=["auth"])
    app.include_router(routes_users.router, prefix="/users", tags=["users"])
    app.include_router(routes_itineraries.router, prefix="/itineraries", tags=["itineraries"])
    app.include_router(routes_collaborators.router, prefix="/itineraries", tags=["collaboration"])

    # Inject shared collaborators into state for dependencies
    app.state.repository = repository or build_repository(settings)
    app.state.generation_client = generation_client or build_generation_client(settings)
    app.state.settings = settings
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
