# dutyfree/services/content_service.py
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from dutyfree.core.exceptions import DataStoreUnavailable, ItemNotFound
from dutyfree.models.content import WebsiteContent
from dutyfree.repositories.content_repo import ContentRepository
from dutyfree.schemas.content import ContentCreate, ContentRead, ContentUpdate

logger = logging.getLogger(__name__)


def to_read(block: WebsiteContent) -> ContentRead:
    data = block.model_dump(exclude={"meta"})
    return ContentRead(**data, metadata=block.meta)


class ContentService:
    """
    Editable website content blocks (hero images, banners, copy).
    """

    def __init__(self, repo: ContentRepository):
        self.repo = repo

    def _fail(self, session: Session, action: str, exc: SQLAlchemyError) -> DataStoreUnavailable:
        session.rollback()
        logger.error("%s: %s", action, exc)
        return DataStoreUnavailable(action)

    def list_content(self, session: Session, section: str | None = None) -> list[ContentRead]:
        try:
            blocks = self.repo.list(session, section)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading content", exc)
        return [to_read(b) for b in blocks]

    def get_section(self, session: Session, section: str) -> list[ContentRead]:
        """Public read; an unknown section is 404 so pages can fall back."""
        blocks = self.list_content(session, section)
        if not blocks:
            raise ItemNotFound("Content section")
        return blocks

    def _get(self, session: Session, content_id: uuid.UUID) -> WebsiteContent:
        try:
            block = self.repo.get_by_id(session, content_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error loading content", exc)
        if not block:
            raise ItemNotFound("Content")
        return block

    def create_content(self, session: Session, payload: ContentCreate) -> ContentRead:
        data = payload.model_dump(exclude={"metadata"})
        block = WebsiteContent(**data, meta=payload.metadata)
        try:
            block = self.repo.create(session, block)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error creating content", exc)
        logger.info("Created content %s in section %s", block.id, block.section)
        return to_read(block)

    def update_content(
        self,
        session: Session,
        content_id: uuid.UUID,
        payload: ContentUpdate,
    ) -> ContentRead:
        block = self._get(session, content_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(block, "meta" if field == "metadata" else field, value)
        try:
            block = self.repo.update(session, block)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error updating content", exc)
        return to_read(block)

    def delete_content(self, session: Session, content_id: uuid.UUID) -> None:
        block = self._get(session, content_id)
        try:
            self.repo.delete(session, block)
        except SQLAlchemyError as exc:
            raise self._fail(session, "Error deleting content", exc)
        logger.info("Deleted content %s", content_id)
