# dutyfree/schemas/upload.py
from datetime import datetime

from sqlmodel import SQLModel


class StoredFile(SQLModel):
    """
    Object in the CMS uploads bucket.
    """

    name: str
    url: str
    size: int | None = None
    content_type: str | None = None
    created_at: datetime | None = None
