"""
Daily report management screen controller.

The census source (active + recently discharged patients) is fetched once;
changing the date or specialty re-filters it locally. Changing the date also
reloads the daily reports filed for that day.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple, Union

from ..core.errors import BackendError
from ..schemas import CensusPatient, DailyReportEntry
from ..services.lifecycle import parse_day
from ..services.report_generator import CensusReportGenerator, report_filename, report_generator
from ..services.ward import WardService
from .base import RequestSequencer, Screen

logger = logging.getLogger(__name__)


class DailyReportScreen(Screen):
    def __init__(self, service: WardService):
        super().__init__()
        self.service = service
        self.selected_date: Optional[date] = service.today()
        self.selected_specialty = ""
        self.patients: List[CensusPatient] = []
        self.filtered_patients: List[CensusPatient] = []
        self.daily_reports: List[DailyReportEntry] = []
        self.loading = True
        self._patient_requests = RequestSequencer()
        self._report_requests = RequestSequencer()

    def open(self) -> None:
        self.load_patients()
        self.load_daily_reports()

    # ── census ─────────────────────────────────────────────────────────────

    def load_patients(self) -> None:
        token = self._patient_requests.issue()
        self.loading = True
        try:
            patients = self.service.census_source()
        except BackendError as exc:
            logger.warning("Error fetching patients: %s", exc)
            self.fail_patients(token)
            return
        self.receive_patients(token, patients)

    def receive_patients(self, token: int, patients: List[CensusPatient]) -> bool:
        if not self._patient_requests.is_current(token):
            logger.debug("Dropping stale census response %d", token)
            return False
        self.patients = list(patients)
        self.loading = False
        self._refilter()
        return True

    def fail_patients(self, token: int) -> None:
        if self._patient_requests.is_current(token):
            self.loading = False
            self.notify_error("Failed to fetch patients")

    def set_date(self, value: Union[date, str, None]) -> None:
        self.selected_date = parse_day(value) if value else None
        self._refilter()
        if self.selected_date:
            self.load_daily_reports()

    def set_specialty(self, value: Optional[str]) -> None:
        self.selected_specialty = value or ""
        self._refilter()

    def _refilter(self) -> None:
        if self.selected_date is None:
            self.filtered_patients = []
            return
        self.filtered_patients = self.service.filter_census(
            self.patients, self.selected_date, self.selected_specialty
        )

    # ── daily reports ──────────────────────────────────────────────────────

    def load_daily_reports(self) -> None:
        if self.selected_date is None:
            return
        token = self._report_requests.issue()
        try:
            reports = self.service.list_daily_reports(self.selected_date)
        except BackendError as exc:
            logger.warning("Error fetching daily reports: %s", exc)
            if self._report_requests.is_current(token):
                self.notify_error("Failed to fetch daily reports")
            return
        self.receive_daily_reports(token, reports)

    def receive_daily_reports(self, token: int, reports: List[DailyReportEntry]) -> bool:
        if not self._report_requests.is_current(token):
            logger.debug("Dropping stale daily report response %d", token)
            return False
        self.daily_reports = list(reports)
        return True

    # ── export ─────────────────────────────────────────────────────────────

    def export_pdf(self, generator: Optional[CensusReportGenerator] = None) -> Tuple[str, bytes]:
        generator = generator or report_generator
        day = self.selected_date.isoformat() if self.selected_date else ""
        specialty = self.selected_specialty or None
        pdf = generator.generate(self.filtered_patients, day, specialty)
        return report_filename(day, specialty), pdf
