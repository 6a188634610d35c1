"""Storage writer lifespan event."""

from photo_relay.core.lifespan import BaseEvent
from photo_relay.core.settings import settings as st
from photo_relay.services.storage import StorageWriter, create_storage_writer


class StorageEvent(BaseEvent[StorageWriter]):
    """Creates one S3 client at startup and closes it on shutdown."""

    name = "storage"

    async def startup(self) -> StorageWriter:
        return create_storage_writer(st)

    async def shutdown(self, instance: StorageWriter) -> None:
        instance.close()
