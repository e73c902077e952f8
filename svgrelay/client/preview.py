import uuid

import structlog

logger = structlog.get_logger()


class PreviewRegistry:
    """
    Local display handles for selected images, in the manner of browser blob URLs.

    Handles never leave the client. Each one must be revoked exactly once.
    """

    def __init__(self):
        self._handles = {}

    def create(self, data: bytes, content_type: str) -> str:
        handle = f"blob:{uuid.uuid4()}"
        self._handles[handle] = (data, content_type)
        logger.debug("Created preview handle", handle=handle, content_type=content_type)
        return handle

    def revoke(self, handle: str):
        """
        Releases a handle.
        Raises:
            KeyError: If the handle is unknown or was already revoked.
        """
        del self._handles[handle]
        logger.debug("Revoked preview handle", handle=handle)

    def resolve(self, handle: str):
        return self._handles.get(handle)

    @property
    def active_count(self) -> int:
        return len(self._handles)
