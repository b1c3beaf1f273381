# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from core.database import Base


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver_name = Column(String(120), nullable=False, default="")
    truck_id = Column(String(60), nullable=False, default="")
    shipment_reference = Column(String(120), nullable=False, default="")
    type_of_damage = Column(String(120), nullable=False, default="")
    damage_description = Column(Text, nullable=False, default="")
    severity = Column(String(40), nullable=False, default="")
    goods_affected = Column(Text, nullable=False, default="")
    cause_of_damage = Column(Text, nullable=False, default="")
    witnesses = Column(Text, nullable=False, default="")
    # Comma-delimited photo tokens, kept as text for display
    photos = Column(Text, nullable=False, default="")
    additional_comments = Column(Text, nullable=False, default="")

    date_and_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    uploaded_photos = relationship("IncidentPhoto", back_populates="incident")


class IncidentPhoto(Base):
    __tablename__ = "incident_photos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Null until the photo is associated with a saved incident
    incident_id = Column(Integer, ForeignKey("incidents.id"), nullable=True)
    file_path = Column(String, nullable=False)
    url = Column(String, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    incident = relationship("Incident", back_populates="uploaded_photos")
