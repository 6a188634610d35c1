"""Upload acceptance rules."""

from photo_relay.core.errors import NoFileProvided, UnsupportedMediaType
from photo_relay.models.core import ParsedForm, ValidatedUpload

FILE_FIELD = "file"
USER_ID_FIELD = "userId"
DEFAULT_USER_ID = "default-user"
ALLOWED_MEDIA_PREFIXES = ("image/", "video/")


def is_allowed_media_type(content_type: str) -> bool:
    return content_type.startswith(ALLOWED_MEDIA_PREFIXES)


def resolve_user_id(form: ParsedForm, default: str = DEFAULT_USER_ID) -> str:
    """Use the ``userId`` field when present and non-empty. No authentication is implied."""
    return form.get_field(USER_ID_FIELD) or default


def validate_upload(form: ParsedForm, default_user_id: str = DEFAULT_USER_ID) -> ValidatedUpload:
    """Check the form holds an image or video under ``file`` and resolve its owner."""
    part = form.get_file(FILE_FIELD)
    if part is None:
        raise NoFileProvided()

    if not is_allowed_media_type(part.content_type):
        raise UnsupportedMediaType(f"Unsupported media type: {part.content_type}")

    return ValidatedUpload(
        payload=part.payload,
        content_type=part.content_type,
        filename=part.filename,
        user_id=resolve_user_id(form, default_user_id),
    )
