# dutyfree/services/file_service.py
import logging
from typing import Any

from fastapi import HTTPException, UploadFile, status

from dutyfree.core import storage_utils
from dutyfree.core.exceptions import DataStoreUnavailable
from dutyfree.schemas.upload import StoredFile

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_CONTENT_PREFIXES = ("image/", "video/", "application/pdf")


def _to_stored_file(obj: dict[str, Any]) -> StoredFile:
    meta = obj.get("metadata") or {}
    return StoredFile(
        name=obj["name"],
        url=storage_utils.public_url(obj["name"]),
        size=meta.get("size"),
        content_type=meta.get("mimetype"),
        created_at=obj.get("created_at"),
    )


class FileService:
    """
    CMS file manager over the uploads bucket.

    Storage client failures are reported as 503 with an operator-facing
    title; the bucket is never left half-updated by this service.
    """

    def list_files(self, limit: int = 100) -> list[StoredFile]:
        try:
            objects = storage_utils.list_storage(limit=limit)
        except Exception as exc:
            logger.error("Listing uploads failed: %s", exc)
            raise DataStoreUnavailable("Error loading files")
        # Supabase lists a placeholder object for empty folders
        return [
            _to_stored_file(o)
            for o in objects
            if o.get("name") and o["name"] != ".emptyFolderPlaceholder"
        ]

    async def upload_file(self, file: UploadFile) -> StoredFile:
        content_type = file.content_type or "application/octet-stream"
        if not content_type.startswith(ALLOWED_CONTENT_PREFIXES):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported file type: {content_type}",
            )

        data = await file.read()
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty",
            )
        if len(data) > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File too large (max 10 MB)",
            )

        name = storage_utils.generate_filename(file.filename or "upload")
        try:
            url = storage_utils.upload_to_storage(name, data, content_type)
        except Exception as exc:
            logger.error("Upload of %s failed: %s", file.filename, exc)
            raise DataStoreUnavailable("Upload failed")

        logger.info("Uploaded %s as %s (%s bytes)", file.filename, name, len(data))
        return StoredFile(name=name, url=url, size=len(data), content_type=content_type)

    def delete_file(self, name_or_url: str) -> None:
        """
        Delete by object name, or by the public URL the CMS stored.
        """
        path = name_or_url
        if name_or_url.startswith(("http://", "https://")):
            path = storage_utils.extract_path_from_public_url(name_or_url)
            if path is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="URL does not point into the uploads bucket",
                )
        try:
            storage_utils.delete_from_storage(path)
        except Exception as exc:
            logger.error("Delete of %s failed: %s", path, exc)
            raise DataStoreUnavailable("Delete failed")
        logger.info("Deleted upload %s", path)
