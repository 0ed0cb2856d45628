# dutyfree/repositories/user_repo.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session, select

from dutyfree.models.user import Profile, UserRole


class UserRepository:
    """
    Data access layer for profiles and role grants.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Profiles -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, user_id)

    def create(self, session: Session, profile: Profile) -> Profile:
        """Insert a new Profile and return the persisted row."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        profile.updated_at = datetime.now(timezone.utc)
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    # ----- Roles -----

    def has_role(self, session: Session, user_id: uuid.UUID, role: str) -> bool:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        return session.exec(stmt).first() is not None

    def grant_role(self, session: Session, user_id: uuid.UUID, role: str) -> UserRole:
        grant = UserRole(user_id=user_id, role=role)
        session.add(grant)
        session.commit()
        session.refresh(grant)
        return grant
