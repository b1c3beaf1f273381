# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from core.database import get_db
from schemas.incident import (
    IncidentCreateRequest,
    IncidentResponse,
    IncidentUpdateRequest,
    PhotoUploadResponse,
)
from services.incident_service import IncidentService

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("/", response_model=list[IncidentResponse])
def list_incidents(db: Session = Depends(get_db)):
    return IncidentService.list_incidents(db)


@router.post("/", response_model=IncidentResponse)
def create_incident(payload: IncidentCreateRequest, db: Session = Depends(get_db)):
    return IncidentService.create_incident(payload, payload.date_and_time, db)


@router.post("/upload-photo", response_model=PhotoUploadResponse)
def upload_incident_photo(
    files: list[UploadFile] = File(...),
    report_id: Optional[int] = Form(None, alias="reportId"),
    db: Session = Depends(get_db)
):
    urls = IncidentService.upload_photos(files, report_id, db)
    return PhotoUploadResponse(photos=urls, report_id=report_id)


@router.get("/{incident_id}", response_model=IncidentResponse)
def get_incident(incident_id: int, db: Session = Depends(get_db)):
    return IncidentService.get_incident(incident_id, db)


@router.put("/{incident_id}", response_model=IncidentResponse)
def update_incident(
    incident_id: int,
    payload: IncidentUpdateRequest,
    db: Session = Depends(get_db)
):
    incident = IncidentService.get_incident(incident_id, db)
    return IncidentService.update_incident(incident, payload, payload.date_and_time, db)
