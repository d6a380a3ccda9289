import logging
from typing import Optional
from uuid import uuid4

from wanderplan.core.errors import NotFoundError, UnauthorizedError
from wanderplan.core.security import hash_password, verify_password
from wanderplan.models.domain import User
from wanderplan.storage.repository import Repository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, repository: Repository):
        self.repository = repository

    def register(self, name: str, email: str, password: str) -> User:
        user = User(
            user_id=uuid4().hex,
            name=name.strip(),
            email=normalize_email(email),
            password_hash=hash_password(password),
        )
        self.repository.insert_user(user)
        logger.info("Registered user %s", user.user_id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.repository.get_user_by_email(normalize_email(email))
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return user

    def get(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: User, name: Optional[str] = None, image: Optional[str] = None) -> User:
        fields = {}
        if name is not None:
            fields["name"] = name.strip()
        if image is not None:
            fields["image"] = image or None
        if not fields:
            return user
        updated = self.repository.update_user(user.user_id, fields)
        if not updated:
            raise NotFoundError("User not found")
        return updated
