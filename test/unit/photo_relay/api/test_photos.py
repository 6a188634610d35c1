"""Tests for the photo listing endpoint."""

from datetime import UTC, datetime

import orjson

from photo_relay.api.photos import get_photos, photos_preflight
from photo_relay.core.router import wrap_handler


class FakeQueryParams:
    def __init__(self, **values: str) -> None:
        self._values = values

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)


def expect_listing(stub, user_id: str, keys: list[str]) -> None:
    stub.add_response(
        "list_objects_v2",
        {
            "Contents": [{"Key": key, "Size": 3, "LastModified": datetime(2024, 5, 1, tzinfo=UTC)} for key in keys],
            "IsTruncated": False,
        },
        {"Bucket": "photos-bucket", "Prefix": f"photo-uploader/{user_id}/"},
    )
    for key in keys:
        stub.add_response(
            "head_object",
            {"ContentType": "image/jpeg", "Metadata": {"user-id": user_id, "original-name": "p.jpg"}},
            {"Bucket": "photos-bucket", "Key": key},
        )


async def test_lists_user_photos(make_mock_request, global_dependencies, s3_stub) -> None:
    expect_listing(s3_stub, "alice", ["photo-uploader/alice/1-a.jpg"])

    response = await wrap_handler(get_photos)(
        make_mock_request(), query_params=FakeQueryParams(userId="alice"), global_dependencies=global_dependencies
    )
    payload = orjson.loads(response.description)

    assert response.status_code == 200
    assert payload["success"] is True
    assert payload["count"] == 1
    assert payload["data"][0]["originalName"] == "p.jpg"
    assert payload["data"][0]["url"] == "https://cdn.example.com/photo-uploader/alice/1-a.jpg"


async def test_missing_user_falls_back_to_default(make_mock_request, global_dependencies, s3_stub) -> None:
    expect_listing(s3_stub, "default-user", [])

    response = await wrap_handler(get_photos)(
        make_mock_request(), query_params=FakeQueryParams(), global_dependencies=global_dependencies
    )

    assert orjson.loads(response.description) == {"success": True, "count": 0, "data": []}


async def test_storage_failure_is_500(make_mock_request, global_dependencies, s3_stub) -> None:
    s3_stub.add_client_error("list_objects_v2", service_error_code="AccessDenied", http_status_code=403)

    response = await wrap_handler(get_photos)(
        make_mock_request(), query_params=FakeQueryParams(userId="alice"), global_dependencies=global_dependencies
    )
    payload = orjson.loads(response.description)

    assert response.status_code == 500
    assert payload["code"] == "StorageReadFailed"


async def test_preflight(make_mock_request) -> None:
    response = await wrap_handler(photos_preflight)(make_mock_request())
    assert response.status_code == 200
