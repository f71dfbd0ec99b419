from typing import Any, Optional
from uuid import uuid4

from portal.errors import GatewayError, PortalError
from portal.models.common import FileUpload
from portal.services.gateway import Gateway
from portal.services.storage import Storage
from portal.utils.clock import Clock, utcnow
from portal.utils.logger import get_logger


logger = get_logger("lifecycle")


def new_id() -> str:
    return uuid4().hex


class Lifecycle:
    """Shared plumbing: a gateway for records, storage for uploads, and an injectable clock."""

    def __init__(self, gateway: Gateway, storage: Optional[Storage] = None, clock: Clock = utcnow) -> None:
        self.gateway = gateway
        self.storage = storage
        self.clock = clock

    def _store_and_create(self, collection: str, folder: str, upload: FileUpload, build) -> dict[str, Any]:
        """Store *upload*, then write the record ``build(path)``.

        The stored file is removed again when the record write fails, so a
        failed call leaves neither a record nor an orphaned upload.
        """
        if self.storage is None:
            raise GatewayError("file storage is not configured")
        path = self.storage.upload(folder, upload.name, upload.data, upload.content_type)
        try:
            return self.gateway.create(collection, build(path))
        except PortalError:
            try:
                self.storage.remove(path)
            except GatewayError as e:
                logger.error("Could not remove orphaned upload %s: %s", path, e)
            raise
