# dutyfree/routers/uploads.py
from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from dutyfree.core.auth import require_admin
from dutyfree.schemas.upload import StoredFile
from dutyfree.services.file_service import FileService

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
    dependencies=[Depends(require_admin)],
)

service = FileService()


@router.get("", response_model=list[StoredFile])
def list_files(limit: int = Query(default=100, ge=1, le=1000)):
    """Files in the CMS uploads bucket, newest first (admin only)."""
    return service.list_files(limit)


@router.post("", response_model=StoredFile, status_code=status.HTTP_201_CREATED)
async def upload_file(file: UploadFile = File(...)):
    """
    Upload an image, video or PDF; returns its public URL (admin only).

    The stored name is "<epoch ms>-<random>.<ext>" so uploads never collide.
    """
    return await service.upload_file(file)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(target: str = Query(..., description="Object name or public URL")):
    """Delete a file by object name or public URL (admin only)."""
    service.delete_file(target)
    return None
