"""Read endpoint listing the photos a user has stored."""

from robyn import Response

from photo_relay.core.lifespan import get_state_value
from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.router import Router
from photo_relay.core.settings import settings as st
from photo_relay.events.storage import StorageEvent
from photo_relay.services.responses import empty_response, listing_response
from photo_relay.services.storage import StorageWriter

PHOTOS_PATH = "/get-photos-s3"
CORS_METHODS = "GET, OPTIONS"

router = Router(__file__, prefix="/api")


async def list_photos(writer: StorageWriter, user_id: str | None, default_user_id: str = st.DEFAULT_USER_ID) -> Response:
    user_id = user_id or default_user_id
    photos = await writer.list_objects(user_id)
    logger.info("Loaded photos", icon=LogIcon.DOWNLOAD, user_id=user_id, count=len(photos))
    return listing_response(photos)


async def get_photos(query_params, global_dependencies) -> Response:
    writer: StorageWriter = get_state_value(global_dependencies, StorageEvent.name)
    return await list_photos(writer, query_params.get("userId", None))


async def photos_preflight() -> Response:
    return empty_response()


router.get(PHOTOS_PATH)(get_photos)
router.options(PHOTOS_PATH)(photos_preflight)
