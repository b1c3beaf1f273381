"""
Client module - incident form controller and its collaborators.
"""
from client.incident_api import IncidentApiClient
from client.incident_form import IncidentFormController, PhotoFile, SubmissionState
from client.results import FailureKind, OperationResult

__all__ = [
    "FailureKind",
    "IncidentApiClient",
    "IncidentFormController",
    "OperationResult",
    "PhotoFile",
    "SubmissionState",
]
