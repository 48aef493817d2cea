"""
Ward patient lifecycle rules: the Active -> Discharged transition, the
post-discharge visibility window and the daily census filter.

Everything here is pure; the ward service supplies the clock and the rows.
"""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional, Protocol, Union

from ..core.errors import DischargeValidationError
from ..models.patient import PatientStatus
from .query import Query, and_, eq, gte

DEFAULT_VISIBILITY_HOURS = 48
INVALID_DISCHARGE_MOMENT = "Please enter a valid discharge date and time"

DateLike = Union[date, datetime, str]


class CensusRow(Protocol):
    admission_date: DateLike
    specialty: Optional[str]
    patient_status: str
    updated_at: Optional[datetime]


def visibility_cutoff(now: datetime, hours: int = DEFAULT_VISIBILITY_HOURS) -> datetime:
    """Oldest discharge timestamp that still shows up in census views."""
    return now - timedelta(hours=hours)


def active_roster_query() -> Query:
    return Query().eq("patient_status", PatientStatus.ACTIVE).order_by("admission_date", descending=True)


def visit_history_query(mrn: str) -> Query:
    return Query().eq("mrn", mrn).order_by("admission_date", descending=True)


def census_source_query(now: datetime, hours: int = DEFAULT_VISIBILITY_HOURS) -> Query:
    """Active patients plus those discharged within the visibility window."""
    return (
        Query()
        .or_(
            eq("patient_status", PatientStatus.ACTIVE),
            and_(
                eq("patient_status", PatientStatus.DISCHARGED),
                gte("updated_at", visibility_cutoff(now, hours)),
            ),
        )
        .order_by("admission_date", descending=True)
    )


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_census_visible(patient: CensusRow, now: datetime, hours: int = DEFAULT_VISIBILITY_HOURS) -> bool:
    if patient.patient_status == PatientStatus.ACTIVE:
        return True
    if patient.patient_status != PatientStatus.DISCHARGED or patient.updated_at is None:
        return False
    return _as_naive_utc(patient.updated_at) >= _as_naive_utc(visibility_cutoff(now, hours))


def to_local_date(value: DateLike, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of ``value`` in the ward time zone.

    Aware datetimes are converted to ``tz``; naive datetimes and plain dates
    are taken as already local.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value) if "T" in value or " " in value else date.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def filter_census(
    patients: Iterable[CensusRow],
    day: date,
    specialty: Optional[str] = None,
    tz: tzinfo = timezone.utc,
) -> list:
    """Patients admitted on ``day`` (and in ``specialty`` when given), order kept."""
    matched = [p for p in patients if to_local_date(p.admission_date, tz) == day]
    if specialty:
        matched = [p for p in matched if p.specialty == specialty]
    return matched


def search_roster(patients: Iterable, term: str) -> list:
    """Case-insensitive name match, or MRN substring match."""
    if not term:
        return list(patients)
    needle = term.lower()
    return [p for p in patients if needle in p.patient_name.lower() or term in p.mrn]


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_discharge(mrn: Optional[str], discharge_date, discharge_time) -> None:
    if _blank(mrn) or _blank(discharge_date) or _blank(discharge_time):
        raise DischargeValidationError()
    try:
        parse_day(discharge_date)
        if not isinstance(discharge_time, time):
            time.fromisoformat(discharge_time)
    except (TypeError, ValueError):
        raise DischargeValidationError(INVALID_DISCHARGE_MOMENT)


def discharge_values(now: datetime, note: Optional[str]) -> dict:
    """Columns written by the discharge transition."""
    return {
        "patient_status": PatientStatus.DISCHARGED,
        "updated_at": now,
        "discharge_note": note or "",
    }


def format_display_date(value: DateLike, fmt: str = "%m/%d/%Y", tz: tzinfo = timezone.utc) -> str:
    return to_local_date(value, tz).strftime(fmt)


def parse_day(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)
