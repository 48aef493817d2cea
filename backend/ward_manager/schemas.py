"""Records exchanged between the ward service, the screens and the API."""
from datetime import date, datetime, time, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from .services.lifecycle import to_local_date


def _admission_day(value, info: ValidationInfo):
    """Backends may hand back a timestamp; keep its calendar day in the ward time zone."""
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    tz = (info.context or {}).get("tz", timezone.utc)
    return to_local_date(value, tz)


class ActivePatient(BaseModel):
    """Active roster entry. ``admission_date`` is already formatted for display."""
    model_config = ConfigDict(from_attributes=True)

    id: str  # visit row; the discharge targets exactly this row
    mrn: str
    patient_name: str
    admission_date: str
    admission_time: Optional[str] = None
    patient_status: str


class Visit(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mrn: str
    admission_date: date
    admission_time: Optional[time] = None
    updated_at: Optional[datetime] = None

    _normalize_admission_date = field_validator("admission_date", mode="before")(_admission_day)


class CensusPatient(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mrn: str
    patient_name: str
    admission_date: date
    specialty: Optional[str] = None
    patient_status: str
    diagnosis: Optional[str] = None
    updated_at: Optional[datetime] = None

    _normalize_admission_date = field_validator("admission_date", mode="before")(_admission_day)


class DailyReportEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    report_id: str
    patient_id: str
    report_date: date
    report_content: str


class DischargeRequest(BaseModel):
    # Strings so an empty form field reaches the required-field check
    visit_id: Optional[str] = None
    discharge_date: Optional[str] = None
    discharge_time: Optional[str] = None
    discharge_note: str = ""


class DischargeResult(BaseModel):
    mrn: str
    patient_status: str
    updated_at: datetime
    discharge_note: str
    rows_updated: int
