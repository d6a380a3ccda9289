import pytest
from fastapi.testclient import TestClient

from main import create_app
from wanderplan.core.security import create_access_token
from wanderplan.llm.backends.mock_backend import MockGenerationBackend
from wanderplan.llm.client import GenerationClient
from wanderplan.services.user_service import UserService
from wanderplan.storage.repository import InMemoryRepository


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def user_service(repository):
    return UserService(repository=repository)


@pytest.fixture
def owner(user_service):
    return user_service.register("Xena Owner", "xena@example.com", "secret123")


@pytest.fixture
def collaborator(user_service):
    return user_service.register("Yusuf Helper", "yusuf@example.com", "secret123")


@pytest.fixture
def stranger(user_service):
    return user_service.register("Zoe Stranger", "zoe@example.com", "secret123")


@pytest.fixture
def generation_client() -> GenerationClient:
    return GenerationClient(backend=MockGenerationBackend(), models=["mock-itinerary"])


@pytest.fixture
def client(repository, generation_client) -> TestClient:
    app = create_app(repository=repository, generation_client=generation_client)
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}

    return _headers
