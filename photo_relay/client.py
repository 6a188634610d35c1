"""HTTP client for the upload and listing endpoints of either storage provider.

The provider is fixed when the client is constructed, so two clients pointed at
different providers can be used side by side.
"""

from enum import StrEnum
from typing import Any

import httpx

from photo_relay.core.logger import LogIcon, logger


class StorageProvider(StrEnum):
    """Backend that stores the photos."""

    CLOUDINARY = "cloudinary"
    S3 = "s3"


ENDPOINTS: dict[StorageProvider, dict[str, str]] = {
    StorageProvider.CLOUDINARY: {"upload": "/api/upload", "photos": "/api/get-photos"},
    StorageProvider.S3: {"upload": "/api/upload-s3", "photos": "/api/get-photos-s3"},
}


class PhotoApiError(Exception):
    """Raised when an endpoint answers with an error status or ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PhotoApiClient:
    """Async client bound to one storage provider."""

    def __init__(
        self,
        base_url: str,
        provider: StorageProvider = StorageProvider.S3,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.provider = StorageProvider(provider)
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "PhotoApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def upload_endpoint(self) -> str:
        return ENDPOINTS[self.provider]["upload"]

    @property
    def photos_endpoint(self) -> str:
        return ENDPOINTS[self.provider]["photos"]

    async def upload_photo(
        self,
        filename: str,
        content: bytes,
        content_type: str,
        user_id: str = "default-user",
    ) -> dict[str, Any]:
        """Upload one file and return the stored object description."""
        logger.info("Uploading photo", icon=LogIcon.UPLOAD, provider=self.provider.value, name=filename)
        response = await self._http.post(
            self.upload_endpoint,
            files={"file": (filename, content, content_type)},
            data={"userId": user_id},
        )
        return self._unwrap(response)["data"]

    async def load_photos(self, user_id: str = "default-user") -> list[dict[str, Any]]:
        """List the photos stored for ``user_id``."""
        response = await self._http.get(self.photos_endpoint, params={"userId": user_id})
        result = self._unwrap(response)
        logger.info(
            "Loaded photos", icon=LogIcon.DOWNLOAD, provider=self.provider.value, count=result.get("count")
        )
        return result["data"]

    def _unwrap(self, response: httpx.Response) -> dict[str, Any]:
        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}

        if response.is_error:
            raise PhotoApiError(result.get("error") or f"HTTP error! status: {response.status_code}", response.status_code)
        if not result.get("success"):
            raise PhotoApiError(result.get("error") or "Request failed", response.status_code)
        return result
