# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FailureKind(str, Enum):
    FETCH_FAILURE = "FetchFailure"
    UPLOAD_FAILURE = "UploadFailure"
    CAMERA_ACCESS_FAILURE = "CameraAccessFailure"
    SUBMISSION_FAILURE = "SubmissionFailure"


@dataclass
class OperationResult:
    """Outcome of one form operation, for the presentation layer to surface."""

    ok: bool
    failure: Optional[FailureKind] = None
    detail: Optional[str] = None
    data: Any = None

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failed(cls, failure: FailureKind, detail: str) -> "OperationResult":
        return cls(ok=False, failure=failure, detail=detail)


class FormError(Exception):
    """Base class for misuse of the incident form."""


class FormNotReadyError(FormError):
    pass


class UnknownFieldError(FormError, KeyError):
    pass


class InvalidTransitionError(FormError):
    pass


class CameraAccessError(Exception):
    """Camera could not be opened or read."""
