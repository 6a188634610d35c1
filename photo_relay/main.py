"""photo-relay - multipart photo uploads relayed to object storage, powered by Robyn."""

from robyn import Robyn

from photo_relay.api.health import router as health_router
from photo_relay.api.photos import CORS_METHODS as PHOTOS_CORS_METHODS
from photo_relay.api.photos import PHOTOS_PATH
from photo_relay.api.photos import router as photos_router
from photo_relay.api.upload import CORS_METHODS as UPLOAD_CORS_METHODS
from photo_relay.api.upload import UPLOAD_PATH
from photo_relay.api.upload import router as upload_router
from photo_relay.core.lifespan import create_lifespan
from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.settings import settings as st
from photo_relay.events.storage import StorageEvent
from photo_relay.middlewares.base import MiddlewareHandler
from photo_relay.middlewares.cors import CorsMiddleware
from photo_relay.middlewares.files import MultipartOpenAPIMiddleware

app = Robyn(__file__)

# Lifespan events
lifespan = create_lifespan(app)
lifespan.register(StorageEvent)

app.startup_handler(lifespan.startup)
app.shutdown_handler(lifespan.shutdown)

# Routers
app.include_router(health_router)
app.include_router(upload_router)
app.include_router(photos_router)

# Middlewares
middlewares = MiddlewareHandler(app)
middlewares.register(CorsMiddleware(endpoints=[f"/api{UPLOAD_PATH}"], allow_methods=UPLOAD_CORS_METHODS))
middlewares.register(CorsMiddleware(endpoints=[f"/api{PHOTOS_PATH}"], allow_methods=PHOTOS_CORS_METHODS))
middlewares.register(MultipartOpenAPIMiddleware())


def main() -> None:
    logger.info("Starting server", icon=LogIcon.START, service=st.API_NAME, host=st.API_HOST, port=st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
