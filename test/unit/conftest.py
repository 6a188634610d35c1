"""Test fixtures for photo-relay unit tests."""

from dataclasses import dataclass, field

import boto3
import pytest
from botocore.stub import Stubber

from photo_relay.core.lifespan import State
from photo_relay.services.storage import StorageConfig, StorageWriter

BOUNDARY = "----WebKitFormBoundary7MA4YWxkTrZu0gW"


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request. Keys are case-insensitive."""

    _data: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._data = {k.lower(): v for k, v in self._data.items()}

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/"


# -----------------------------------------------------------------------------
# Multipart helpers
# -----------------------------------------------------------------------------


def build_multipart(
    fields: dict[str, str] | None = None,
    files: dict[str, tuple[str, str, bytes]] | None = None,
    boundary: str = BOUNDARY,
) -> bytes:
    """Encode fields and (filename, content_type, payload) files the way browsers do."""
    chunks: list[bytes] = []
    for name, value in (fields or {}).items():
        chunks.append(
            f'--{boundary}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n'.encode()
            + value.encode()
            + b"\r\n"
        )
    for name, (filename, content_type, payload) in (files or {}).items():
        chunks.append(
            (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
                f"Content-Type: {content_type}\r\n\r\n"
            ).encode()
            + payload
            + b"\r\n"
        )
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


def multipart_content_type(boundary: str = BOUNDARY) -> str:
    return f"multipart/form-data; boundary={boundary}"


@pytest.fixture
def make_mock_request():
    """Factory fixture to create multipart mock requests."""

    def _make(body: bytes = b"", content_type: str | None = multipart_content_type(), **headers) -> MockRequest:
        data = dict(headers)
        if content_type is not None:
            data["content-type"] = content_type
        return MockRequest(body=body, headers=MockHeaders(data))

    return _make


# -----------------------------------------------------------------------------
# Storage fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def s3_client():
    """Real boto3 client that never leaves the process once stubbed."""
    return boto3.client(
        "s3",
        region_name="eu-central-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def s3_stub(s3_client):
    with Stubber(s3_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(bucket_name="photos-bucket", delivery_domain="cdn.example.com")


@pytest.fixture
def storage_writer(s3_client, storage_config) -> StorageWriter:
    return StorageWriter(s3_client, storage_config)


# -----------------------------------------------------------------------------
# State fixture
# -----------------------------------------------------------------------------


@pytest.fixture
def global_dependencies(storage_writer):
    """Injected globals as Robyn hands them to handlers after startup."""
    state = State()
    state.storage = storage_writer
    yield {"state": state}
    state.clear()


@pytest.fixture
def multipart_body():
    """Factory fixture building browser-style multipart bodies."""
    return build_multipart
