# dutyfree/core/local_storage.py
"""
Device-local key/value storage used for the guest cart.

The interface mirrors the browser's Web Storage API (get/set/remove by key,
string values only). Two backends:

  - MemoryStorage: in-process dict, optional byte quota. Used by scripts
    and tests.
  - CookieStorage: keeps each key in a cookie on the HTTP client, so the
    value stays on the shopper's device and the server holds nothing.
"""
import base64
import binascii
import logging
from typing import Protocol

from fastapi import Request, Response

logger = logging.getLogger(__name__)


class QuotaExceededError(Exception):
    """Raised by set_item when the value does not fit the backend's quota."""


class LocalStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(
                len(v.encode("utf-8")) for k, v in self._items.items() if k != key
            )
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise QuotaExceededError(f"Storage quota exceeded writing '{key}'")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class CookieStorage:
    """
    Web-Storage facade over request/response cookies.

    Values are base64url-encoded (unpadded) for transport so JSON survives cookie
    quoting. Writes made during the request are visible to later reads
    in the same request.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        *,
        max_bytes: int = 4000,
        max_age: int | None = None,
    ):
        self.request = request
        self.response = response
        self.max_bytes = max_bytes
        self.max_age = max_age
        self._pending: dict[str, str | None] = {}

    @staticmethod
    def _encode(value: str) -> str:
        # Padding is dropped; "=" would force a quoted cookie value
        return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")

    @staticmethod
    def _decode(raw: str) -> str:
        try:
            padded = raw + "=" * (-len(raw) % 4)
            return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            # Hand back the raw value; callers treat unparsable content as empty
            logger.debug("Cookie value is not base64url; returning raw value")
            return raw

    def get_item(self, key: str) -> str | None:
        if key in self._pending:
            return self._pending[key]
        raw = self.request.cookies.get(key)
        if raw is None:
            return None
        return self._decode(raw)

    def set_item(self, key: str, value: str) -> None:
        encoded = self._encode(value)
        if len(encoded) > self.max_bytes:
            raise QuotaExceededError(
                f"Cookie '{key}' would be {len(encoded)} bytes (max {self.max_bytes})"
            )
        self.response.set_cookie(
            key,
            encoded,
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
        )
        self._pending[key] = value

    def remove_item(self, key: str) -> None:
        self.response.delete_cookie(key)
        self._pending[key] = None
