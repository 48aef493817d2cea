"""
Ward service: the operations behind the discharge and daily report screens.

Each operation is a single backend round trip. Validation errors are raised
before any backend call; backend failures propagate as BackendError and are
never retried here.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Callable, List, Optional, Union
from zoneinfo import ZoneInfo

from ..core.config import Settings, settings as default_settings
from pydantic import ValidationError

from ..core.errors import BackendError, DischargeConflictError, PatientNotFoundError
from ..models.base import utcnow
from ..models.patient import PatientStatus, Specialty
from ..schemas import ActivePatient, CensusPatient, DailyReportEntry, DischargeResult, Visit
from .backend import DAILY_REPORTS_TABLE, PATIENTS_TABLE, WardBackend
from .lifecycle import (
    active_roster_query,
    census_source_query,
    discharge_values,
    filter_census,
    format_display_date,
    is_census_visible,
    parse_day,
    validate_discharge,
    visit_history_query,
)
from .query import Query

logger = logging.getLogger(__name__)

ACTIVE_COLUMNS = ("id", "mrn", "patient_name", "admission_date", "admission_time", "patient_status")
VISIT_COLUMNS = ("mrn", "admission_date", "admission_time", "updated_at")
CENSUS_COLUMNS = (
    "mrn", "patient_name", "admission_date", "specialty",
    "patient_status", "diagnosis", "updated_at",
)
REPORT_COLUMNS = ("report_id", "patient_id", "report_date", "report_content")


def _display_time(value: Union[time, str, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)[:5]


class WardService:
    def __init__(
        self,
        backend: WardBackend,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.backend = backend
        self.config = config or default_settings
        self.clock = clock
        self.tz = ZoneInfo(self.config.WARD_TIMEZONE)

    def today(self) -> date:
        """Current calendar day in the ward time zone."""
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.tz).date()

    # ── Patient discharge ──────────────────────────────────────────────────

    def list_active(self) -> List[ActivePatient]:
        rows = self.backend.select(PATIENTS_TABLE, ACTIVE_COLUMNS, active_roster_query())
        try:
            return [
                ActivePatient(
                    id=str(row["id"]),
                    mrn=row["mrn"],
                    patient_name=row["patient_name"],
                    admission_date=format_display_date(
                        row["admission_date"], self.config.DISPLAY_DATE_FORMAT, self.tz
                    ),
                    admission_time=_display_time(row.get("admission_time")),
                    patient_status=row["patient_status"],
                )
                for row in rows
            ]
        except (KeyError, ValueError) as exc:
            raise BackendError("select active patients", f"malformed row: {exc}") from exc

    def list_visits_for(self, mrn: str) -> List[Visit]:
        rows = self.backend.select(PATIENTS_TABLE, VISIT_COLUMNS, visit_history_query(mrn))
        return self._records(Visit, rows, "select visits")

    def discharge(
        self,
        mrn: Optional[str],
        discharge_date,
        discharge_time,
        note: Optional[str] = "",
        visit_id: Optional[str] = None,
    ) -> DischargeResult:
        """
        Move one visit to Discharged, stamping updated_at and the note.

        The update matches ``mrn`` and ``visit_id``; without a visit id it
        matches the MRN's Active visit, so closed visits keep their timestamp
        and note. Unconditional for a given visit by default, so concurrent
        discharges both succeed and the last write wins. With
        DISCHARGE_REQUIRE_ACTIVE the update only matches a visit that is
        still Active.
        """
        validate_discharge(mrn, discharge_date, discharge_time)

        now = self.clock()
        values = discharge_values(now, note)
        query = Query().eq("mrn", mrn)
        if visit_id:
            query.eq("id", visit_id)
        if not visit_id or self.config.DISCHARGE_REQUIRE_ACTIVE:
            query.eq("patient_status", PatientStatus.ACTIVE)

        count = self.backend.update(PATIENTS_TABLE, values, query)
        if count == 0:
            if self.config.DISCHARGE_REQUIRE_ACTIVE:
                raise DischargeConflictError(mrn)
            raise PatientNotFoundError(mrn)

        logger.info("Discharged patient %s (%d row(s)) at %s", mrn, count, now.isoformat())
        return DischargeResult(
            mrn=mrn,
            patient_status=values["patient_status"],
            updated_at=now,
            discharge_note=values["discharge_note"],
            rows_updated=count,
        )

    def _records(self, model, rows, operation: str) -> list:
        """Validate backend rows; a row that does not fit the record is a backend failure."""
        try:
            return [model.model_validate(row, context={"tz": self.tz}) for row in rows]
        except ValidationError as exc:
            raise BackendError(operation, f"malformed row: {exc.error_count()} error(s)") from exc

    # ── Daily census ───────────────────────────────────────────────────────

    def census_source(self) -> List[CensusPatient]:
        """Active patients plus recently discharged ones, newest admission first."""
        now = self.clock()
        hours = self.config.DISCHARGE_VISIBILITY_HOURS
        rows = self.backend.select(PATIENTS_TABLE, CENSUS_COLUMNS, census_source_query(now, hours))
        patients = self._records(CensusPatient, rows, "select census")
        return [p for p in patients if is_census_visible(p, now, hours)]

    def filter_census(
        self,
        patients: List[CensusPatient],
        day: Union[date, str],
        specialty: Optional[str] = None,
    ) -> List[CensusPatient]:
        return filter_census(patients, parse_day(day), specialty or None, self.tz)

    def census(self, day: Union[date, str], specialty: Optional[str] = None) -> List[CensusPatient]:
        return self.filter_census(self.census_source(), day, specialty)

    def list_daily_reports(self, report_date: Union[date, str]) -> List[DailyReportEntry]:
        query = Query().eq("report_date", parse_day(report_date)).order_by("created_at", descending=True)
        rows = self.backend.select(DAILY_REPORTS_TABLE, REPORT_COLUMNS, query)
        return self._records(DailyReportEntry, rows, "select daily reports")

    @staticmethod
    def specialties() -> List[str]:
        return list(Specialty.ALL)
