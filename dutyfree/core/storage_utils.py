# dutyfree/core/storage_utils.py
import re
import time
import uuid
from typing import Any

from dutyfree.core.config import get_settings
from dutyfree.core.supabase_client import supabase_admin

settings = get_settings()


def _bucket():
    # Client is created on first use so imports work without the service key
    return supabase_admin().storage.from_(settings.UPLOADS_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str | None = None) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    Args:
        path: Full object path inside the bucket.
              Example: "1718000000000-ab12cd.png"
        file_bytes: File content in bytes.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    options = {"upsert": "true"}
    if content_type:
        options["content-type"] = content_type
    _bucket().upload(path, file_bytes, options)
    return public_url(path)


def public_url(path: str) -> str:
    return _bucket().get_public_url(path)


def list_storage(limit: int = 100) -> list[dict[str, Any]]:
    """
    List objects at the bucket root, newest first.

    Each entry is the raw Supabase object dict (name, id, created_at, metadata).
    """
    return _bucket().list(
        "",
        {"limit": limit, "sortBy": {"column": "created_at", "order": "desc"}},
    )


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.
    """
    # Supabase Python client expects a list of paths.
    _bucket().remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/cms-uploads/a.png
        -> 'a.png'
    """
    marker = f"/storage/v1/object/public/{settings.UPLOADS_BUCKET}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :]


def generate_filename(original_name: str) -> str:
    """
    Build a unique object name that keeps the original extension.

    Pattern: "<epoch ms>-<8 hex chars>.<ext>"
    """
    ext = ""
    if "." in original_name:
        ext = re.sub(r"[^a-z0-9]", "", original_name.rsplit(".", 1)[1].lower())
    stem = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
    return f"{stem}.{ext}" if ext else stem
