"""Byte-level multipart/form-data decoder.

The whole body is split on ``--<boundary>``. Each segment that carries a
form-data disposition becomes a :class:`Part`; its payload runs from the first
blank line after the headers to the last line break of the segment. The
decoder has no escaping: a payload containing ``\\r\\n--<boundary>`` is cut
short at that point.
"""

import re

from photo_relay.core.errors import MissingBoundary
from photo_relay.models.core import ParsedForm, Part

BOUNDARY_PARAM = "boundary="
HEADER_TERMINATOR = b"\r\n\r\n"
LINE_BREAK = b"\r\n"

_DISPOSITION_RE = re.compile(rb"Content-Disposition:\s*form-data", re.IGNORECASE)
_NAME_RE = re.compile(rb'(?<![\w-])name="([^"]+)"')
_FILENAME_RE = re.compile(rb'filename="([^"]+)"')
_CONTENT_TYPE_RE = re.compile(rb"Content-Type:[ \t]*([^\r\n]+)", re.IGNORECASE)


def extract_boundary(content_type: str | None) -> str:
    """Return the boundary token of a multipart content type or raise MissingBoundary."""
    if not content_type or BOUNDARY_PARAM not in content_type:
        raise MissingBoundary()

    token = content_type.split(BOUNDARY_PARAM, 1)[1].split(";", 1)[0].strip().strip('"')
    if not token:
        raise MissingBoundary()
    return token


def _decode_header_value(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").strip()


def parse_part(segment: bytes) -> Part | None:
    """Turn one boundary-delimited segment into a Part, or None when it is not a named form-data part."""
    header_end = segment.find(HEADER_TERMINATOR)
    if header_end == -1:
        return None

    headers = segment[:header_end]
    if not _DISPOSITION_RE.search(headers):
        return None

    name_match = _NAME_RE.search(headers)
    if not name_match:
        return None

    filename_match = _FILENAME_RE.search(headers)
    content_type_match = _CONTENT_TYPE_RE.search(headers)

    payload_start = header_end + len(HEADER_TERMINATOR)
    payload_end = segment.rfind(LINE_BREAK)
    payload = segment[payload_start:payload_end] if payload_end >= payload_start else b""

    if filename_match and content_type_match:
        return Part(
            name=_decode_header_value(name_match.group(1)),
            filename=_decode_header_value(filename_match.group(1)),
            content_type=_decode_header_value(content_type_match.group(1)),
            payload=payload,
        )

    return Part(name=_decode_header_value(name_match.group(1)), filename=None, content_type=None, payload=payload)


def decode_multipart(content_type: str | None, body: bytes) -> ParsedForm:
    """Decode a fully buffered multipart body into a ParsedForm."""
    boundary = extract_boundary(content_type)
    delimiter = f"--{boundary}".encode()

    form = ParsedForm()
    for segment in body.split(delimiter):
        if not segment.strip():
            continue
        part = parse_part(segment)
        if part is not None:
            form.add(part)
    return form
