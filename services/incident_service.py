# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging
from datetime import datetime
from typing import Iterable, Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from models.incident import Incident, IncidentPhoto
from schemas.incident import IncidentFields
from services.config_service import get_upload_dir
from services.photo_service import build_photo_url, safe_photo_name, split_photo_tokens

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_SIZE = 10 * 1024 * 1024

log = logging.getLogger(__name__)


def validate_images(photos: Iterable[UploadFile]) -> None:
    for photo in photos:
        if photo.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=400, detail="Invalid file type. Only images allowed.")
        contents = photo.file.read()
        if len(contents) > MAX_IMAGE_SIZE:
            raise HTTPException(status_code=400, detail="File too large. Maximum 10MB.")
        photo.file.seek(0)


def save_incident_photos(report_id: Optional[int], photos: Iterable[UploadFile]) -> list[IncidentPhoto]:
    upload_root = get_upload_dir()
    folder = str(report_id) if report_id is not None else "unassigned"
    upload_dir = upload_root / "incidents" / folder
    upload_dir.mkdir(parents=True, exist_ok=True)
    saved = []

    for photo in photos:
        file_path = upload_dir / safe_photo_name(photo.filename or "", default_stem="incident")
        with file_path.open("wb") as buffer:
            buffer.write(photo.file.read())

        saved.append(IncidentPhoto(
            incident_id=report_id,
            file_path=str(file_path),
            url=build_photo_url(str(file_path), str(upload_root)),
        ))

    return saved


def apply_fields(incident: Incident, payload: IncidentFields) -> None:
    for name in IncidentFields.model_fields:
        setattr(incident, name, getattr(payload, name))


class IncidentService:
    @staticmethod
    def create_incident(payload: IncidentFields, date_and_time: Optional[datetime], db: Session) -> Incident:
        incident = Incident(date_and_time=date_and_time or datetime.utcnow())
        apply_fields(incident, payload)
        db.add(incident)
        db.commit()
        db.refresh(incident)

        IncidentService.associate_photos(incident, db)
        log.info("Incident %s created for truck %r", incident.id, incident.truck_id)
        return incident

    @staticmethod
    def list_incidents(db: Session) -> list[Incident]:
        return db.query(Incident).order_by(Incident.created_at.desc(), Incident.id.desc()).all()

    @staticmethod
    def get_incident(incident_id: int, db: Session) -> Incident:
        incident = db.query(Incident).filter(Incident.id == incident_id).first()
        if not incident:
            raise HTTPException(status_code=404, detail="Incident not found")
        return incident

    @staticmethod
    def update_incident(
        incident: Incident,
        payload: IncidentFields,
        date_and_time: Optional[datetime],
        db: Session
    ) -> Incident:
        apply_fields(incident, payload)
        if date_and_time is not None:
            incident.date_and_time = date_and_time  # type: ignore[assignment]
        incident.updated_at = datetime.utcnow()  # type: ignore[assignment]
        db.commit()
        db.refresh(incident)

        IncidentService.associate_photos(incident, db)
        log.info("Incident %s updated", incident.id)
        return incident

    @staticmethod
    def upload_photos(photos: list[UploadFile], report_id: Optional[int], db: Session) -> list[str]:
        """Store photos and return their URLs, in upload order."""
        if not photos:
            raise HTTPException(status_code=400, detail="Select at least one photo")

        if report_id is not None:
            IncidentService.get_incident(report_id, db)

        validate_images(photos)
        saved_photos = save_incident_photos(report_id, photos)
        for photo in saved_photos:
            db.add(photo)
        db.commit()

        log.info("Stored %s photo(s) for incident %s", len(saved_photos), report_id or "(unsaved)")
        return [str(photo.url) for photo in saved_photos]

    @staticmethod
    def associate_photos(incident: Incident, db: Session) -> int:
        """Link unassigned uploads whose URL is listed in the incident's photos field."""
        tokens = split_photo_tokens(str(incident.photos or ""))
        if not tokens:
            return 0

        pending = db.query(IncidentPhoto).filter(
            IncidentPhoto.incident_id.is_(None),
            IncidentPhoto.url.in_(tokens)
        ).all()
        for photo in pending:
            photo.incident_id = incident.id  # type: ignore[assignment]
        if pending:
            db.commit()
        return len(pending)
