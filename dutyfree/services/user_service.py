# dutyfree/services/user_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from dutyfree.core.exceptions import DataStoreUnavailable
from dutyfree.models.user import Profile
from dutyfree.repositories.user_repo import UserRepository
from dutyfree.schemas.user import ProfileRead, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for the signed-in shopper's own profile.

    The profile row is auto-provisioned in `get_current_user`.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get_me(self, session: Session, current_user: Profile) -> ProfileRead:
        """Return the current user, flagged when they hold the admin role."""
        data = current_user.model_dump()
        data["is_admin"] = self.repo.has_role(session, current_user.id, "admin")
        return ProfileRead(**data)

    def update_me(
        self,
        session: Session,
        current_user: Profile,
        payload: ProfileUpdate,
    ) -> ProfileRead:
        """
        Partial update for profile edits.
        Currently, only `full_name` is editable.
        """
        if payload.full_name is not None:
            current_user.full_name = payload.full_name
        try:
            profile = self.repo.update(session, current_user)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Profile update failed for %s: %s", current_user.id, exc)
            raise DataStoreUnavailable("Error updating profile")
        return self.get_me(session, profile)
