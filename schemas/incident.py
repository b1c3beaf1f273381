# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class IncidentFields(BaseModel):
    """Free-text fields of an incident record. Wire names are camelCase."""

    driver_name: str = ""
    truck_id: str = ""
    shipment_reference: str = ""
    type_of_damage: str = ""
    damage_description: str = ""
    severity: str = ""
    goods_affected: str = ""
    cause_of_damage: str = ""
    witnesses: str = ""
    photos: str = ""
    additional_comments: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IncidentCreateRequest(IncidentFields):
    date_and_time: Optional[datetime] = None


class IncidentUpdateRequest(IncidentFields):
    date_and_time: Optional[datetime] = None


class IncidentResponse(IncidentFields):
    id: int
    date_and_time: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PhotoUploadResponse(BaseModel):
    photos: list[str]
    report_id: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Wire names of the fields a user can edit, in form order
EDITABLE_FIELDS = tuple(to_camel(name) for name in IncidentFields.model_fields)
