"""Upload endpoint: decode, validate, store, respond."""

from robyn import Response

from photo_relay.core.errors import MethodNotAllowed
from photo_relay.core.lifespan import get_state_value
from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.router import Router
from photo_relay.core.settings import settings as st
from photo_relay.events.storage import StorageEvent
from photo_relay.models.core import ParsedForm
from photo_relay.services.responses import empty_response, success_response
from photo_relay.services.storage import StorageWriter
from photo_relay.services.validator import validate_upload

UPLOAD_PATH = "/upload-s3"
CORS_METHODS = "POST, OPTIONS"

router = Router(__file__, prefix="/api")


async def process_upload(form: ParsedForm, writer: StorageWriter, default_user_id: str = st.DEFAULT_USER_ID) -> Response:
    upload = validate_upload(form, default_user_id=default_user_id)
    logger.info(
        "File info",
        icon=LogIcon.IMAGE,
        user_id=upload.user_id,
        name=upload.filename,
        type=upload.content_type,
        size=upload.size,
    )
    stored = await writer.write(upload)
    return success_response(stored)


async def upload_photo(form: ParsedForm, global_dependencies) -> Response:
    """Store one image or video sent as multipart/form-data."""
    writer: StorageWriter = get_state_value(global_dependencies, StorageEvent.name)
    return await process_upload(form, writer)


async def upload_preflight() -> Response:
    return empty_response()


async def upload_method_not_allowed() -> Response:
    raise MethodNotAllowed()


router.post(UPLOAD_PATH)(upload_photo)
router.options(UPLOAD_PATH)(upload_preflight)
for _method in ("get", "put", "patch", "delete"):
    getattr(router, _method)(UPLOAD_PATH)(upload_method_not_allowed)
