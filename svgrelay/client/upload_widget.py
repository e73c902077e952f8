"""
Client-side upload widget.

`UploadWidget` owns the single selected image, its preview handle and the
result of the last process request. Its methods are the only way state
changes; a UI layer calls them from its event handlers and renders from
`snapshot()`.

States::

    IDLE --drag_over--> DRAGGING --drag_leave--> IDLE (no image) / READY (image held)
    IDLE | DRAGGING | READY --accept_file--> READY
    READY --process--> PROCESSING --(success or failure)--> READY
    any state --close--> IDLE (a request still in flight has its result discarded)
"""
import base64
import mimetypes
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import structlog

from ..utils.svg_sanitizer import UnsafeMarkupError, sanitize_svg
from .preview import PreviewRegistry
from .relay_client import RelayClientError

logger = structlog.get_logger()


class UploadState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    READY = "ready"
    PROCESSING = "processing"


@dataclass(frozen=True)
class IncomingFile:
    """A file handed over by a drop or the file picker."""
    data: bytes
    content_type: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class SelectedImage:
    data: bytes
    content_type: str
    preview_handle: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class ProcessResult:
    svg: Optional[str] = None
    animated: Optional[bool] = None
    error: Optional[str] = None


class UploadWidget:

    def __init__(self, transport, previews: PreviewRegistry = None):
        self.transport = transport
        self.previews = previews or PreviewRegistry()
        self.state = UploadState.IDLE
        self.image: Optional[SelectedImage] = None
        self.result: Optional[ProcessResult] = None

    # Drag and drop

    def drag_over(self):
        if self.state is UploadState.PROCESSING:
            return
        self.state = UploadState.DRAGGING

    def drag_leave(self):
        if self.state is not UploadState.DRAGGING:
            return
        self.state = UploadState.READY if self.image else UploadState.IDLE

    def drop(self, files: Sequence[IncomingFile]) -> bool:
        if not files:
            self.drag_leave()
            return False
        return self.accept_file(files[0])

    def choose_file(self, path: str) -> bool:
        """
        File picker entry point. The content type is guessed from the file name.
        """
        content_type, _ = mimetypes.guess_type(path)
        if not (content_type or "").startswith("image/"):
            logger.info("Ignored non-image file", path=path, content_type=content_type)
            return False
        with open(path, 'rb') as f:
            data = f.read()
        return self.accept_file(IncomingFile(data, content_type, os.path.basename(path)))

    def accept_file(self, file: IncomingFile) -> bool:
        """
        Replaces the held image with `file`.
        Returns:
            bool: `False` (and nothing changes) for non-image files or while a request is in flight.
        """
        if self.state is UploadState.PROCESSING:
            return False
        if not (file.content_type or "").startswith("image/"):
            logger.info("Ignored non-image file", filename=file.filename, content_type=file.content_type)
            return False

        handle = self.previews.create(file.data, file.content_type)
        previous, self.image = self.image, SelectedImage(file.data, file.content_type, handle, file.filename)
        if previous:
            self.previews.revoke(previous.preview_handle)

        self.result = None
        self.state = UploadState.READY
        logger.debug("Accepted image", filename=file.filename, size=len(file.data))
        return True

    # Processing

    @property
    def can_process(self) -> bool:
        return self.image is not None and self.state is not UploadState.PROCESSING

    def process(self) -> bool:
        """
        Sends the held image to the relay and stores the outcome.
        Returns:
            bool: `False` when the trigger is disabled (no image, or a request already in flight).
        """
        if not self.can_process:
            return False

        image = self.image
        self.state = UploadState.PROCESSING
        self.result = None
        try:
            image_data = base64.b64encode(image.data).decode("ascii")
            data = self.transport.process_image(image_data, image.content_type)
            result = ProcessResult(svg=sanitize_svg(data["svg"]), animated=data.get("animated"))
        except RelayClientError as e:
            result = ProcessResult(error=str(e) or "Something went wrong")
        except UnsafeMarkupError as e:
            logger.warning("Discarded unsafe SVG", error=str(e))
            result = ProcessResult(error="The returned SVG could not be displayed safely")
        finally:
            # close() during the request tears the widget down for good
            closed = self.image is not image
            self.state = UploadState.IDLE if closed else UploadState.READY

        if closed:
            logger.info("Discarded result of a request finished after close")
        else:
            self.result = result
        return True

    # Rendering

    @property
    def rendered_svg(self) -> Optional[str]:
        return self.result.svg if self.result else None

    @property
    def error(self) -> Optional[str]:
        return self.result.error if self.result else None

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "filename": self.image.filename if self.image else None,
            "preview": self.image.preview_handle if self.image else None,
            "svg": self.rendered_svg,
            "animated": self.result.animated if self.result else None,
            "error": self.error,
            "can_process": self.can_process,
        }

    def close(self):
        """Releases the preview handle of the held image."""
        if self.image:
            self.previews.revoke(self.image.preview_handle)
            self.image = None
        self.result = None
        self.state = UploadState.IDLE
