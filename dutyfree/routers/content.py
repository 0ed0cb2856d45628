# dutyfree/routers/content.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from dutyfree.core.auth import require_admin
from dutyfree.database import get_session
from dutyfree.repositories.content_repo import ContentRepository
from dutyfree.schemas.content import ContentCreate, ContentRead, ContentUpdate
from dutyfree.services.content_service import ContentService

router = APIRouter(prefix="/content", tags=["Content"])

service = ContentService(ContentRepository())


@router.get(
    "",
    response_model=list[ContentRead],
    dependencies=[Depends(require_admin)],
)
def list_content(
    section: str | None = None,
    session: Session = Depends(get_session),
):
    """All content blocks grouped by section (admin only)."""
    return service.list_content(session, section)


@router.get("/section/{section}", response_model=list[ContentRead])
def get_section(section: str, session: Session = Depends(get_session)):
    """
    Content blocks of one section, e.g. "hero_image_desktop" (public).
    """
    return service.get_section(session, section)


@router.post(
    "",
    response_model=ContentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_content(payload: ContentCreate, session: Session = Depends(get_session)):
    return service.create_content(session, payload)


@router.patch(
    "/{content_id}",
    response_model=ContentRead,
    dependencies=[Depends(require_admin)],
)
def update_content(
    content_id: uuid.UUID,
    payload: ContentUpdate,
    session: Session = Depends(get_session),
):
    return service.update_content(session, content_id, payload)


@router.delete(
    "/{content_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_content(content_id: uuid.UUID, session: Session = Depends(get_session)):
    service.delete_content(session, content_id)
    return None
