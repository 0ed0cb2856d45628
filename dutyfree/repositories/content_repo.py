# dutyfree/repositories/content_repo.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session, select

from dutyfree.models.content import WebsiteContent


class ContentRepository:

    def list(self, session: Session, section: str | None = None) -> list[WebsiteContent]:
        stmt = select(WebsiteContent)
        if section is not None:
            stmt = stmt.where(WebsiteContent.section == section)
        stmt = stmt.order_by(WebsiteContent.section, WebsiteContent.created_at)
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, content_id: uuid.UUID) -> WebsiteContent | None:
        return session.get(WebsiteContent, content_id)

    def create(self, session: Session, block: WebsiteContent) -> WebsiteContent:
        session.add(block)
        session.commit()
        session.refresh(block)
        return block

    def update(self, session: Session, block: WebsiteContent) -> WebsiteContent:
        block.updated_at = datetime.now(timezone.utc)
        session.add(block)
        session.commit()
        session.refresh(block)
        return block

    def delete(self, session: Session, block: WebsiteContent) -> None:
        session.delete(block)
        session.commit()
