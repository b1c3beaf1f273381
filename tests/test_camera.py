from types import SimpleNamespace

import pytest

from client import camera as camera_module
from client.camera import CameraStream
from client.results import CameraAccessError


class FakeBuffer:
    def tobytes(self):
        return b"\xff\xd8jpeg"


class FakeCapture:
    instances = []

    def __init__(self, index, opened=True, frame="frame"):
        self.index = index
        self.opened = opened
        self.frame = frame
        self.released = False
        FakeCapture.instances.append(self)

    def isOpened(self):
        return self.opened

    def read(self):
        return (self.frame is not None), self.frame

    def release(self):
        self.released = True


@pytest.fixture
def fake_cv2(monkeypatch):
    FakeCapture.instances = []
    module = SimpleNamespace(
        VideoCapture=lambda index: FakeCapture(index),
        imencode=lambda ext, frame: (True, FakeBuffer()),
    )
    monkeypatch.setattr(camera_module, "cv2", module)
    return module


def test_capture_returns_encoded_jpeg_and_release_stops_stream(fake_cv2):
    stream = CameraStream(device_index=1)

    with stream:
        assert stream.is_open
        assert stream.capture_jpeg() == b"\xff\xd8jpeg"

    (capture,) = FakeCapture.instances
    assert capture.index == 1
    assert capture.released
    assert not stream.is_open


def test_unavailable_device_raises_and_releases(fake_cv2):
    fake_cv2.VideoCapture = lambda index: FakeCapture(index, opened=False)
    stream = CameraStream(device_index=0)

    with pytest.raises(CameraAccessError):
        stream.open()

    assert FakeCapture.instances[0].released
    assert not stream.is_open


def test_capture_without_open_or_frame_raises(fake_cv2):
    stream = CameraStream(device_index=0)
    with pytest.raises(CameraAccessError):
        stream.capture_jpeg()

    fake_cv2.VideoCapture = lambda index: FakeCapture(index, frame=None)
    stream.open()
    with pytest.raises(CameraAccessError):
        stream.capture_jpeg()
    stream.release()
    stream.release()


def test_device_index_defaults_to_configured_camera(fake_cv2, monkeypatch):
    monkeypatch.setenv("CAMERA_INDEX", "2")
    assert CameraStream().device_index == 2
