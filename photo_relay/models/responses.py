"""JSON payload models. Field names are serialized in camelCase."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class StoredObject(CamelModel):
    """Descriptor of a file written to the bucket. Never mutated after creation."""

    id: str
    url: str
    original_name: str
    size: int
    type: str
    upload_date: str
    user_id: str
    storage_key: str
    bucket: str


class PhotoListing(CamelModel):
    """One previously stored object as returned by the read endpoint."""

    id: str
    url: str
    original_name: str | None = None
    size: int
    type: str | None = None
    upload_date: str
    user_id: str
    storage_key: str


class UploadResponse(CamelModel):
    success: bool = True
    message: str = "Dosya başarıyla yüklendi!"
    data: StoredObject


class ListingResponse(CamelModel):
    success: bool = True
    count: int
    data: list[PhotoListing]


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    code: str
    details: str | None = None


class HealthResponse(CamelModel):
    """Health check response model."""

    status: str
    service: str
    version: str
