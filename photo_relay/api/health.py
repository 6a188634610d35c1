"""Health check endpoint."""

from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.router import Router
from photo_relay.core.settings import settings as st
from photo_relay.models.responses import HealthResponse

router = Router(__file__, prefix="/")


@router.get("/health")
async def health_check() -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    return HealthResponse(status="healthy", service=st.API_NAME, version=st.API_VERSION)
