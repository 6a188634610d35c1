"""Failure kinds raised along the upload pipeline.

Each kind knows the HTTP status and user-facing message it maps to; the router
turns any of them into a JSON error response.
"""

from robyn import status_codes


class UploadError(Exception):
    """Base class for failures that terminate an upload or listing request."""

    status_code: int = status_codes.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Beklenmeyen bir hata oluştu"

    def __init__(self, details: str | None = None) -> None:
        super().__init__(details or self.message)
        self.details = details

    @property
    def code(self) -> str:
        return type(self).__name__


class MissingBoundary(UploadError):
    """Content-Type header carries no multipart boundary."""

    status_code = status_codes.HTTP_400_BAD_REQUEST
    message = "No boundary found"


class NoFileProvided(UploadError):
    """Decoded form has no file part named ``file``."""

    status_code = status_codes.HTTP_400_BAD_REQUEST
    message = "Dosya bulunamadı"


class UnsupportedMediaType(UploadError):
    """Declared MIME type is neither an image nor a video."""

    status_code = status_codes.HTTP_400_BAD_REQUEST
    message = "Sadece resim ve video dosyaları destekleniyor"


class StorageWriteFailed(UploadError):
    """The object store rejected or failed the put."""

    message = "Dosya yüklenirken hata oluştu"


class StorageReadFailed(UploadError):
    """Listing or reading stored objects failed."""

    message = "Fotoğraflar alınırken hata oluştu"


class UnexpectedFailure(UploadError):
    """Catch-all for anything not covered above."""


class MethodNotAllowed(UploadError):
    """Request method other than POST or OPTIONS on the upload endpoint."""

    status_code = status_codes.HTTP_405_METHOD_NOT_ALLOWED
    message = "Sadece POST metodu destekleniyor"
