# dutyfree/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from dutyfree.core.auth import require_auth
from dutyfree.database import get_session
from dutyfree.models.user import Profile
from dutyfree.repositories.user_repo import UserRepository
from dutyfree.schemas.user import ProfileRead, ProfileUpdate
from dutyfree.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)


@router.get("/me", response_model=ProfileRead)
def read_me(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Return the current authenticated profile.

    The row is created on first sight of a valid token.
    """
    return service.get_me(session, current_user)


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Update own profile (full name).
    """
    return service.update_me(session, current_user, payload)
