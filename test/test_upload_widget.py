import base64

import pytest

from svgrelay.client import IncomingFile, PreviewRegistry, RelayClientError, UploadState, UploadWidget

PNG = IncomingFile(b"\x89PNG-one", "image/png", "one.png")
JPEG = IncomingFile(b"\xff\xd8-two", "image/jpeg", "two.jpg")
SVG = '<svg xmlns="http://www.w3.org/2000/svg"><style>@keyframes a {}</style><rect width="1"/></svg>'


class FakeTransport:

    def __init__(self, reply=None, error=None, on_call=None):
        self.reply = reply if reply is not None else {"svg": SVG, "animated": True}
        self.error = error
        self.on_call = on_call
        self.calls = []

    def process_image(self, image_data, mime_type):
        self.calls.append((image_data, mime_type))
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def previews():
    return PreviewRegistry()


@pytest.fixture
def widget(transport, previews):
    return UploadWidget(transport, previews)


@pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "", "video/mp4", "imagex/png"])
def test_non_image_files_are_ignored(widget, previews, content_type):
    assert widget.accept_file(IncomingFile(b"data", content_type, "file")) is False
    assert widget.state is UploadState.IDLE
    assert widget.image is None
    assert previews.active_count == 0


def test_non_image_file_keeps_held_image(widget):
    widget.accept_file(PNG)
    widget.accept_file(IncomingFile(b"data", "text/plain", "notes.txt"))
    assert widget.image.filename == "one.png"
    assert widget.state is UploadState.READY


def test_replacing_image_releases_previous_preview(widget, previews):
    widget.accept_file(PNG)
    first = widget.image.preview_handle
    widget.accept_file(JPEG)

    assert previews.active_count == 1
    assert previews.resolve(first) is None
    assert previews.resolve(widget.image.preview_handle) == (JPEG.data, "image/jpeg")
    with pytest.raises(KeyError):
        previews.revoke(first)


def test_accepting_clears_previous_result(widget):
    widget.accept_file(PNG)
    widget.process()
    assert widget.rendered_svg
    widget.accept_file(JPEG)
    assert widget.result is None
    assert widget.rendered_svg is None


def test_drag_without_image(widget):
    widget.drag_over()
    assert widget.state is UploadState.DRAGGING
    widget.drag_leave()
    assert widget.state is UploadState.IDLE


def test_drag_with_image(widget):
    widget.accept_file(PNG)
    widget.drag_over()
    assert widget.state is UploadState.DRAGGING
    widget.drag_leave()
    assert widget.state is UploadState.READY


def test_drop_accepts_first_file(widget):
    widget.drag_over()
    assert widget.drop([JPEG, PNG]) is True
    assert widget.image.filename == "two.jpg"
    assert widget.state is UploadState.READY


def test_empty_drop_restores_state(widget):
    widget.drag_over()
    assert widget.drop([]) is False
    assert widget.state is UploadState.IDLE


def test_choose_file(widget, tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG-picked")
    assert widget.choose_file(str(path)) is True
    assert widget.image.content_type == "image/png"
    assert widget.image.data == b"\x89PNG-picked"

    text = tmp_path / "notes.txt"
    text.write_text("hello")
    assert widget.choose_file(str(text)) is False
    assert widget.image.filename == "photo.png"


def test_process_without_image_is_inert(widget, transport):
    assert widget.can_process is False
    assert widget.process() is False
    assert widget.state is UploadState.IDLE
    assert transport.calls == []


def test_process_success(widget, transport):
    widget.accept_file(PNG)
    assert widget.process() is True

    assert transport.calls == [(base64.b64encode(PNG.data).decode(), "image/png")]
    assert widget.state is UploadState.READY
    assert "@keyframes" in widget.rendered_svg
    assert widget.result.animated is True
    assert widget.error is None


def test_process_is_not_reentrant(previews):
    states = []
    transport = FakeTransport()
    widget = UploadWidget(transport, previews)

    def reenter():
        states.append(widget.state)
        states.append(widget.can_process)
        states.append(widget.process())

    transport.on_call = reenter
    widget.accept_file(PNG)
    widget.process()

    assert states == [UploadState.PROCESSING, False, False]
    assert len(transport.calls) == 1
    assert widget.state is UploadState.READY


def test_drop_during_processing_is_ignored(previews):
    transport = FakeTransport()
    widget = UploadWidget(transport, previews)
    transport.on_call = lambda: (widget.drag_over(), widget.accept_file(JPEG))
    widget.accept_file(PNG)
    widget.process()

    assert widget.image.filename == "one.png"
    assert previews.active_count == 1
    assert widget.state is UploadState.READY


@pytest.mark.parametrize("error", [
    RelayClientError("Model did not return a valid SVG"),
    RelayClientError("Could not reach the server: connection refused"),
])
def test_process_failure_returns_to_ready(widget, transport, error):
    widget.accept_file(PNG)
    widget.process()
    assert widget.rendered_svg

    transport.error = error
    widget.process()
    assert widget.state is UploadState.READY
    assert widget.error == str(error)
    assert widget.rendered_svg is None


def test_unexpected_error_still_leaves_processing(widget, transport):
    transport.error = RuntimeError("boom")
    widget.accept_file(PNG)
    with pytest.raises(RuntimeError):
        widget.process()
    assert widget.state is UploadState.READY


def test_unsafe_markup_is_not_rendered(widget, transport):
    transport.reply = {"svg": "<svg><g></svg>", "animated": False}
    widget.accept_file(PNG)
    widget.process()
    assert widget.rendered_svg is None
    assert "safely" in widget.error
    assert widget.state is UploadState.READY


def test_snapshot(widget):
    assert widget.snapshot()["state"] == "idle"
    widget.accept_file(PNG)
    snap = widget.snapshot()
    assert snap["state"] == "ready"
    assert snap["filename"] == "one.png"
    assert snap["preview"].startswith("blob:")
    assert snap["can_process"] is True


def test_close_releases_preview(widget, previews):
    widget.accept_file(PNG)
    widget.close()
    widget.close()
    assert previews.active_count == 0
    assert widget.image is None
    assert widget.state is UploadState.IDLE


def test_close_during_processing_discards_result(previews):
    transport = FakeTransport()
    widget = UploadWidget(transport, previews)
    transport.on_call = widget.close
    widget.accept_file(PNG)
    widget.process()

    assert widget.state is UploadState.IDLE
    assert widget.image is None
    assert widget.result is None
    assert previews.active_count == 0


def test_close_during_failed_processing(previews):
    transport = FakeTransport(error=RelayClientError("offline"))
    widget = UploadWidget(transport, previews)
    transport.on_call = widget.close
    widget.accept_file(PNG)
    widget.process()

    assert widget.state is UploadState.IDLE
    assert widget.error is None
