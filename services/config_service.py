# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

"""
Configuration service for runtime settings of the incident form and API.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_API_URL = "http://127.0.0.1:8000/api"
_DEFAULT_LIST_ROUTE = "/incidents"


def get_api_base_url() -> str:
    """Base URL of the incident API, without a trailing slash."""
    value = os.getenv("INCIDENT_API_URL") or _DEFAULT_API_URL
    return value.strip().rstrip("/")


def get_api_timeout() -> Optional[float]:
    """Request timeout in seconds. None (the default) waits indefinitely."""
    env_value = os.getenv("INCIDENT_API_TIMEOUT")
    if not env_value:
        return None
    try:
        timeout = float(env_value)
    except ValueError:
        return None
    return timeout if timeout > 0 else None


def get_incident_list_route() -> str:
    return os.getenv("INCIDENT_LIST_ROUTE") or _DEFAULT_LIST_ROUTE


def get_camera_index() -> int:
    env_value = os.getenv("CAMERA_INDEX")
    if env_value:
        try:
            return int(env_value)
        except ValueError:
            return 0
    return 0


def get_upload_dir() -> Path:
    """Directory the API stores uploaded photos in. Created on first use."""
    upload_dir = Path(os.getenv("UPLOAD_DIR") or "uploads")
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir
