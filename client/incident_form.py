# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging
import mimetypes
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from client.camera import CameraStream
from client.form_state import FormState
from client.results import (
    FailureKind,
    FormNotReadyError,
    InvalidTransitionError,
    OperationResult,
    UnknownFieldError,
)
from schemas.incident import EDITABLE_FIELDS
from services.config_service import get_incident_list_route
from services.photo_service import append_photo_tokens, is_valid_photo_token

log = logging.getLogger(__name__)

CAPTURED_PHOTO_NAME = "captured_image.jpg"


class SubmissionState(str, Enum):
    IDLE = "IDLE"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    SUBMITTING = "SUBMITTING"


@dataclass
class PhotoFile:
    name: str
    content: bytes
    content_type: str = ""

    def __post_init__(self) -> None:
        if not self.content_type:
            guessed, _ = mimetypes.guess_type(self.name)
            self.content_type = guessed or "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "PhotoFile":
        file_path = Path(path)
        return cls(name=file_path.name, content=file_path.read_bytes())


def empty_incident() -> dict[str, Any]:
    return {name: "" for name in EDITABLE_FIELDS}


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IncidentFormController:
    """
    State and transitions of the incident form.

    Without an incident id the form creates a new record and submits
    immediately. With an id it loads the record, and an update must be
    confirmed: request_update() stages a snapshot of the record, confirm()
    submits that snapshot. Edits made while the confirmation is open stay on
    the live record but are not part of the pending submission.

    Failures of external calls are logged and returned as OperationResult;
    they never raise.
    """

    def __init__(
        self,
        api: Any,
        incident_id: Optional[Union[int, str]] = None,
        navigate: Optional[Callable[[str], None]] = None,
        camera_factory: Callable[[], Any] = CameraStream,
        clock: Callable[[], datetime] = _utc_now,
        list_route: Optional[str] = None,
    ) -> None:
        self.api = api
        self.incident_id = str(incident_id) if incident_id not in (None, "") else None
        self.navigate = navigate
        self.camera_factory = camera_factory
        self.clock = clock
        self.list_route = list_route or get_incident_list_route()

        self.state = FormState(empty_incident())
        self.loading = self.incident_id is not None
        self.submission_state = SubmissionState.IDLE
        self.temp_incident: Optional[dict[str, Any]] = None
        self.photo_files: list[PhotoFile] = []

        self._camera: Any = None
        self._upload_lock = threading.Lock()

    @property
    def is_edit_mode(self) -> bool:
        return self.incident_id is not None

    @property
    def dialog_open(self) -> bool:
        return self.submission_state == SubmissionState.PENDING_CONFIRMATION

    @property
    def incident(self) -> dict[str, Any]:
        return self.state.snapshot()

    @property
    def camera_active(self) -> bool:
        return self._camera is not None

    def subscribe(self, listener: Callable[[str, Any], None]) -> Callable[[], None]:
        return self.state.subscribe(listener)

    # ==================== RECORD LOADER ====================
    def load(self) -> OperationResult:
        if not self.is_edit_mode:
            self.state.replace(empty_incident())
            self.loading = False
            return OperationResult.success(self.incident)

        self.loading = True
        try:
            response = self.api.get_incident(self.incident_id)
            if response.status_code != 200:
                return self._fail(
                    FailureKind.FETCH_FAILURE,
                    f"Failed to fetch incident {self.incident_id}: HTTP {response.status_code}",
                )

            data = response.json()
            if not data or not isinstance(data, dict):
                return self._fail(
                    FailureKind.FETCH_FAILURE,
                    f"Failed to fetch incident {self.incident_id}: empty response",
                )

            self.state.replace({**empty_incident(), **data})
            return OperationResult.success(self.incident)
        except Exception as exc:
            return self._fail(FailureKind.FETCH_FAILURE, f"Failed to fetch incident {self.incident_id}", exc)
        finally:
            self.loading = False

    # ==================== FIELD EDITOR ====================
    def set_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise UnknownFieldError(name)
        if self.loading:
            raise FormNotReadyError("Incident details are still loading")
        self.state.set(name, value)

    # ==================== PHOTO PIPELINE ====================
    def select_files(self, files: Optional[Iterable[PhotoFile]]) -> OperationResult:
        chosen = list(files or [])
        if not chosen:
            return OperationResult.success([])

        self._require_ready()
        self.photo_files.extend(chosen)
        return self.upload_photos(chosen)

    def upload_photos(self, files: Optional[Iterable[PhotoFile]]) -> OperationResult:
        """
        Upload photos and append the returned tokens to the photos field.
        On any failure the photos field is left unchanged.
        """
        chosen = list(files or [])
        if not chosen:
            return OperationResult.success([])

        self._require_ready()

        # One upload at a time, so tokens land in call order
        with self._upload_lock:
            try:
                response = self.api.upload_incident_photo(chosen, self.incident_id)
            except Exception as exc:
                return self._fail(FailureKind.UPLOAD_FAILURE, "Photo upload failed", exc)

            if response.status_code != 200:
                return self._fail(FailureKind.UPLOAD_FAILURE, f"Photo upload failed: HTTP {response.status_code}")

            try:
                tokens = response.json()["photos"]
            except Exception as exc:
                return self._fail(FailureKind.UPLOAD_FAILURE, "Photo upload returned an unreadable response", exc)

            if not isinstance(tokens, list):
                return self._fail(FailureKind.UPLOAD_FAILURE, f"Photo upload returned photos as {type(tokens).__name__}, expected a list")

            if not all(isinstance(token, str) and is_valid_photo_token(token) for token in tokens):
                return self._fail(FailureKind.UPLOAD_FAILURE, f"Photo upload returned malformed photo tokens: {tokens!r}")

            current = self.state.get("photos") or ""
            self.state.set("photos", append_photo_tokens(current, tokens))

        log.info("Uploaded %s photo(s), %s stored", len(chosen), len(tokens))
        return OperationResult.success(tokens)

    def start_camera(self) -> OperationResult:
        if self._camera is not None:
            return OperationResult.success()

        try:
            camera = self.camera_factory()
            camera.open()
        except Exception as exc:
            return self._fail(FailureKind.CAMERA_ACCESS_FAILURE, "Error accessing the camera", exc)

        self._camera = camera
        return OperationResult.success()

    def capture_photo(self) -> OperationResult:
        if self._camera is None:
            return self._fail(FailureKind.CAMERA_ACCESS_FAILURE, "Camera has not been started")

        try:
            content = self._camera.capture_jpeg()
        except Exception as exc:
            return self._fail(FailureKind.CAMERA_ACCESS_FAILURE, "Failed to capture a photo", exc)

        return self.select_files([PhotoFile(CAPTURED_PHOTO_NAME, content, "image/jpeg")])

    def stop_camera(self) -> None:
        camera, self._camera = self._camera, None
        if camera is not None:
            camera.release()

    # ==================== SUBMISSION GATE ====================
    def submit(self) -> OperationResult:
        """Create immediately, or open the update confirmation for an existing incident."""
        if self.is_edit_mode:
            return self.request_update()

        self._require_ready()
        self._require_state(SubmissionState.IDLE, "submit")
        record = {**self.state.snapshot(), "dateAndTime": iso_timestamp(self.clock())}
        return self._persist(record)

    def request_update(self) -> OperationResult:
        if not self.is_edit_mode:
            raise InvalidTransitionError("A new incident is submitted without confirmation")
        self._require_ready()
        self._require_state(SubmissionState.IDLE, "request an update")

        self.temp_incident = self.state.snapshot()
        self.submission_state = SubmissionState.PENDING_CONFIRMATION
        return OperationResult.success(dict(self.temp_incident))

    def cancel(self) -> None:
        self._require_state(SubmissionState.PENDING_CONFIRMATION, "cancel")
        self.temp_incident = None
        self.submission_state = SubmissionState.IDLE

    def confirm(self) -> OperationResult:
        self._require_state(SubmissionState.PENDING_CONFIRMATION, "confirm")
        staged = self.temp_incident or {}
        self.temp_incident = None
        record = {**staged, "dateAndTime": iso_timestamp(self.clock())}
        return self._persist(record)

    # ==================== PERSISTENCE ====================
    def _persist(self, record: dict[str, Any]) -> OperationResult:
        self.submission_state = SubmissionState.SUBMITTING
        try:
            if self.is_edit_mode:
                response = self.api.update_incident(self.incident_id, record)
            else:
                response = self.api.add_incident(record)
        except Exception as exc:
            result = self._fail(FailureKind.SUBMISSION_FAILURE, "Submission failed", exc)
        else:
            if response.status_code == 200:
                result = OperationResult.success(record)
            else:
                result = self._fail(
                    FailureKind.SUBMISSION_FAILURE,
                    f"Error submitting the incident report: HTTP {response.status_code}",
                )
        finally:
            self.submission_state = SubmissionState.IDLE

        if result.ok:
            log.info("Incident %s submitted", self.incident_id or "(new)")
            self.close()
            if self.navigate is not None:
                self.navigate(self.list_route)
        return result

    # ==================== LIFECYCLE ====================
    def close(self) -> None:
        """Release the camera and drop any staged update. Call when leaving the form."""
        self.stop_camera()
        self.temp_incident = None

    def __enter__(self) -> "IncidentFormController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_ready(self) -> None:
        if self.loading:
            raise FormNotReadyError("Incident details are still loading")

    def _require_state(self, expected: SubmissionState, action: str) -> None:
        if self.submission_state != expected:
            raise InvalidTransitionError(
                f"Cannot {action} while the form is {self.submission_state.value}"
            )

    def _fail(self, failure: FailureKind, message: str, exc: Optional[BaseException] = None) -> OperationResult:
        if exc is not None:
            log.error("%s: %s", message, exc, exc_info=exc)
            return OperationResult.failed(failure, f"{message}: {exc}")
        log.error(message)
        return OperationResult.failed(failure, message)
