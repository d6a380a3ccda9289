import logging

from wanderplan.core.errors import BadRequestError, NotFoundError
from wanderplan.models.domain import Itinerary, User
from wanderplan.services.itinerary_service import expand_itinerary
from wanderplan.services.permissions import Operation, authorize, identity_key, is_collaborator, same_identity
from wanderplan.services.user_service import normalize_email
from wanderplan.storage.repository import Repository

logger = logging.getLogger(__name__)


class CollaborationService:
    """
    Owner-only management of an itinerary's collaborator set.

    The checks run against the record as read; the write itself is an atomic
    set-add or set-remove in the store, so a concurrent add of the same user
    cannot produce a duplicate entry.
    """

    def __init__(self, repository: Repository):
        self.repository = repository

    def add(self, user: User, itinerary_id: str, email: str) -> Itinerary:
        if not email or not email.strip():
            raise BadRequestError("Please provide an email")
        itinerary = authorize(user, self.repository.get_itinerary(itinerary_id), Operation.administer)

        collaborator = self.repository.get_user_by_email(normalize_email(email))
        if collaborator is None:
            raise NotFoundError("User not found")
        if same_identity(collaborator, itinerary.owner):
            raise BadRequestError("You cannot add yourself as a collaborator")
        if is_collaborator(collaborator, itinerary):
            raise BadRequestError("User is already a collaborator")

        updated = self.repository.add_collaborator(itinerary_id, collaborator.user_id)
        if updated is None:
            raise NotFoundError("Itinerary not found")
        logger.info("Added collaborator %s to itinerary %s", collaborator.user_id, itinerary_id)
        return expand_itinerary(self.repository, updated)

    def remove(self, user: User, itinerary_id: str, collaborator_id: str) -> Itinerary:
        if not collaborator_id or not str(collaborator_id).strip():
            raise BadRequestError("Please provide a collaborator ID")
        authorize(user, self.repository.get_itinerary(itinerary_id), Operation.administer)

        updated = self.repository.remove_collaborator(itinerary_id, identity_key(collaborator_id))
        if updated is None:
            raise NotFoundError("Itinerary not found")
        logger.info("Removed collaborator %s from itinerary %s", collaborator_id, itinerary_id)
        return expand_itinerary(self.repository, updated)
