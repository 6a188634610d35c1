"""Uniform JSON responses for the upload and listing endpoints."""

from pydantic import BaseModel
from robyn import Response, status_codes

from photo_relay.core.errors import UploadError
from photo_relay.models.responses import ErrorResponse, ListingResponse, PhotoListing, StoredObject, UploadResponse

JSON_HEADERS = {"content-type": "application/json"}


def json_response(model: BaseModel, status_code: int = status_codes.HTTP_200_OK) -> Response:
    return Response(
        status_code=status_code,
        headers=dict(JSON_HEADERS),
        description=model.model_dump_json(by_alias=True, exclude_none=True),
    )


def success_response(stored: StoredObject) -> Response:
    return json_response(UploadResponse(data=stored))


def listing_response(items: list[PhotoListing]) -> Response:
    return json_response(ListingResponse(count=len(items), data=items))


def error_response(error: UploadError) -> Response:
    """Wrap any failure kind; ``details`` only appears when the failure carries diagnostics."""
    payload = ErrorResponse(error=error.message, code=error.code, details=error.details)
    return json_response(payload, status_code=error.status_code)


def empty_response(status_code: int = status_codes.HTTP_200_OK) -> Response:
    return Response(status_code=status_code, headers={}, description="")
