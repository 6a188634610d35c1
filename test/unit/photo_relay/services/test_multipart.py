"""Tests for the byte-level multipart decoder."""

import pytest

from photo_relay.core.errors import MissingBoundary
from photo_relay.services.multipart import decode_multipart, extract_boundary, parse_part

BOUNDARY = "----WebKitFormBoundary7MA4YWxkTrZu0gW"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"

# Every byte value, including bare CR/LF and non-UTF-8 sequences
BINARY_PAYLOAD = bytes(range(256)) * 4


# -----------------------------------------------------------------------------
# extract_boundary Tests
# -----------------------------------------------------------------------------


class TestExtractBoundary:
    """Tests for boundary extraction from the content-type header."""

    def test_plain_boundary(self) -> None:
        assert extract_boundary(CONTENT_TYPE) == BOUNDARY

    def test_quoted_boundary_with_trailing_params(self) -> None:
        assert extract_boundary('multipart/form-data; boundary="abc123"; charset=utf-8') == "abc123"

    @pytest.mark.parametrize(
        "content_type",
        [None, "", "multipart/form-data", "application/json", "multipart/form-data; boundary="],
    )
    def test_missing_boundary_raises(self, content_type) -> None:
        with pytest.raises(MissingBoundary):
            extract_boundary(content_type)


# -----------------------------------------------------------------------------
# decode_multipart Tests
# -----------------------------------------------------------------------------


class TestDecodeMultipart:
    """Tests for decode_multipart."""

    def test_recovers_fields_and_file(self, multipart_body) -> None:
        """Verify every field value and the file's name, type and bytes come back intact."""
        body = multipart_body(
            fields={"userId": "alice", "album": "holiday"},
            files={"file": ("cat.png", "image/png", BINARY_PAYLOAD)},
        )

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_field("userId") == "alice"
        assert form.get_field("album") == "holiday"
        part = form.get_file("file")
        assert part is not None
        assert part.is_file
        assert part.filename == "cat.png"
        assert part.content_type == "image/png"
        assert part.payload == BINARY_PAYLOAD
        assert part.size == 1024

    def test_payload_with_line_breaks_is_preserved(self, multipart_body) -> None:
        payload = b"\r\n\r\nline one\r\nline two\r\n"
        body = multipart_body(files={"file": ("notes.jpg", "image/jpeg", payload)})

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file().payload == payload

    def test_empty_file_payload(self, multipart_body) -> None:
        body = multipart_body(files={"file": ("empty.png", "image/png", b"")})

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file().payload == b""

    def test_missing_boundary_raises(self, multipart_body) -> None:
        body = multipart_body(fields={"userId": "alice"})
        with pytest.raises(MissingBoundary):
            decode_multipart("multipart/form-data", body)

    def test_form_without_file_has_only_fields(self, multipart_body) -> None:
        form = decode_multipart(CONTENT_TYPE, multipart_body(fields={"userId": "bob"}))

        assert form.get_file() is None
        assert form.fields == {"userId": b"bob"}

    def test_filename_without_content_type_is_a_field(self) -> None:
        body = (
            f"--{BOUNDARY}\r\n"
            'Content-Disposition: form-data; name="file"; filename="cat.png"\r\n\r\n'
            "data\r\n"
            f"--{BOUNDARY}--\r\n"
        ).encode()

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file() is None
        assert form.fields["file"] == b"data"

    def test_segment_without_name_is_skipped(self) -> None:
        body = (
            f"--{BOUNDARY}\r\n"
            "Content-Disposition: form-data\r\n\r\n"
            "orphan\r\n"
            f"--{BOUNDARY}\r\n"
            'Content-Disposition: form-data; name="userId"\r\n\r\n'
            "carol\r\n"
            f"--{BOUNDARY}--\r\n"
        ).encode()

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.fields == {"userId": b"carol"}
        assert form.files == {}

    def test_filename_before_name_resolves_field_name(self) -> None:
        body = (
            f"--{BOUNDARY}\r\n"
            'Content-Disposition: form-data; filename="clip.mp4"; name="file"\r\n'
            "Content-Type: video/mp4\r\n\r\n"
            "frames\r\n"
            f"--{BOUNDARY}--\r\n"
        ).encode()

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file().filename == "clip.mp4"

    def test_content_type_inside_field_value_does_not_make_a_file(self) -> None:
        body = (
            f"--{BOUNDARY}\r\n"
            'Content-Disposition: form-data; name="note"; filename="x.txt"\r\n\r\n'
            "Content-Type: image/png\r\n"
            f"--{BOUNDARY}--\r\n"
        ).encode()

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file("note") is None
        assert form.fields["note"] == b"Content-Type: image/png"

    def test_utf8_filename(self, multipart_body) -> None:
        body = multipart_body(files={"file": ("kedi-ğüş.png", "image/png", b"x")})

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file().filename == "kedi-ğüş.png"

    def test_payload_containing_delimiter_is_truncated(self, multipart_body) -> None:
        """No escaping exists: a payload carrying the delimiter is cut at that point."""
        payload = b"head\r\n--" + BOUNDARY.encode() + b"tail"
        body = multipart_body(files={"file": ("odd.png", "image/png", payload)})

        form = decode_multipart(CONTENT_TYPE, body)

        assert form.get_file().payload == b"head"


# -----------------------------------------------------------------------------
# parse_part Tests
# -----------------------------------------------------------------------------


class TestParsePart:
    """Tests for single segment parsing."""

    def test_segment_without_header_terminator(self) -> None:
        assert parse_part(b'\r\nContent-Disposition: form-data; name="a"\r\n') is None

    def test_segment_without_disposition(self) -> None:
        assert parse_part(b'\r\nContent-Type: text/plain; name="a"\r\n\r\nvalue\r\n') is None

    def test_field_part(self) -> None:
        part = parse_part(b'\r\nContent-Disposition: form-data; name="userId"\r\n\r\nalice\r\n')

        assert part is not None
        assert part.name == "userId"
        assert not part.is_file
        assert part.payload == b"alice"
