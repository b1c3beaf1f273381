# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging
from typing import Any, Iterable, Mapping, Optional, Union

import requests

from services.config_service import get_api_base_url, get_api_timeout

log = logging.getLogger(__name__)

IncidentId = Union[int, str]


class IncidentApiClient:
    """
    HTTP client for the incident API.

    `session` is anything with the requests call surface (requests.Session,
    FastAPI's TestClient). Calls return the raw response; status handling is
    left to the caller.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Any = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else get_api_timeout()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/incidents/{path}"

    def _options(self) -> dict:
        return {"timeout": self.timeout} if self.timeout is not None else {}

    def list_incidents(self):
        return self.session.get(self._url(""), **self._options())

    def get_incident(self, incident_id: IncidentId):
        log.debug("Fetching incident %s", incident_id)
        return self.session.get(self._url(str(incident_id)), **self._options())

    def add_incident(self, incident: Mapping[str, Any]):
        return self.session.post(self._url(""), json=dict(incident), **self._options())

    def update_incident(self, incident_id: IncidentId, incident: Mapping[str, Any]):
        return self.session.put(self._url(str(incident_id)), json=dict(incident), **self._options())

    def upload_incident_photo(self, files: Iterable[Any], incident_id: Optional[IncidentId] = None):
        """
        Upload photos as multipart `files` parts.
        `reportId` is sent only when the incident already exists.
        """
        parts = [("files", (photo.name, photo.content, photo.content_type)) for photo in files]
        data = {"reportId": str(incident_id)} if incident_id is not None else {}
        return self.session.post(self._url("upload-photo"), files=parts, data=data, **self._options())
