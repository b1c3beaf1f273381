# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging
from typing import Any, Optional

import cv2

from client.results import CameraAccessError
from services.config_service import get_camera_index

log = logging.getLogger(__name__)


class CameraStream:
    """
    Live video source for photo capture.

    Acquire with open() or a with-block; release() stops the stream and is
    safe to call more than once.
    """

    def __init__(self, device_index: Optional[int] = None) -> None:
        self.device_index = get_camera_index() if device_index is None else device_index
        self._capture: Any = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> "CameraStream":
        if self._capture is not None:
            return self

        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise CameraAccessError(f"Camera {self.device_index} is not available")

        self._capture = capture
        log.info("Camera %s opened", self.device_index)
        return self

    def capture_jpeg(self) -> bytes:
        """Grab one frame from the live stream and encode it as JPEG."""
        if self._capture is None:
            raise CameraAccessError("Camera has not been started")

        success, frame = self._capture.read()
        if not success or frame is None:
            raise CameraAccessError("Failed to read a frame from the camera")

        success, buffer = cv2.imencode(".jpg", frame)
        if not success:
            raise CameraAccessError("Failed to encode the captured frame")
        return buffer.tobytes()

    def release(self) -> None:
        if self._capture is None:
            return
        try:
            self._capture.release()
        finally:
            self._capture = None
            log.info("Camera %s released", self.device_index)

    def __enter__(self) -> "CameraStream":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
