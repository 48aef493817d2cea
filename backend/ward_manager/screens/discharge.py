"""
Patient discharge screen controller.

Holds the active roster, the search term, the selected patient with the
discharge form, and the selected patient's previous visits.
"""
import logging
from dataclasses import dataclass
from datetime import timezone
from typing import List, Optional

from ..core.errors import BackendError, DischargeValidationError
from ..schemas import ActivePatient, Visit
from ..services.lifecycle import search_roster
from ..services.ward import WardService
from .base import RequestSequencer, Screen

logger = logging.getLogger(__name__)


@dataclass
class DischargeForm:
    discharge_date: str = ""
    discharge_time: str = ""
    discharge_note: str = ""


class DischargeScreen(Screen):
    def __init__(self, service: WardService):
        super().__init__()
        self.service = service
        self.patients: List[ActivePatient] = []
        self.search_term = ""
        self.selected: Optional[ActivePatient] = None
        self.form = DischargeForm()
        self.previous_visits: List[Visit] = []
        self._roster_requests = RequestSequencer()
        self._visit_requests = RequestSequencer()

    # ── roster ─────────────────────────────────────────────────────────────

    def load_active(self) -> None:
        token = self._roster_requests.issue()
        try:
            patients = self.service.list_active()
        except BackendError as exc:
            logger.warning("Error fetching active patients: %s", exc)
            if self._roster_requests.is_current(token):
                self.notify_error("Failed to fetch active patients")
            return
        self.receive_active(token, patients)

    def receive_active(self, token: int, patients: List[ActivePatient]) -> bool:
        if not self._roster_requests.is_current(token):
            logger.debug("Dropping stale roster response %d", token)
            return False
        self.patients = list(patients)
        return True

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    @property
    def visible_patients(self) -> List[ActivePatient]:
        return search_roster(self.patients, self.search_term)

    # ── selection ──────────────────────────────────────────────────────────

    def select(self, patient: ActivePatient) -> None:
        """Select a patient, prefill the form with the current date/time and load visit history."""
        self.selected = patient
        now = self.service.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(self.service.tz)
        self.form = DischargeForm(
            discharge_date=now.date().isoformat(),
            discharge_time=now.strftime("%H:%M"),
        )
        self.previous_visits = []

        token = self._visit_requests.issue()
        try:
            visits = self.service.list_visits_for(patient.mrn)
        except BackendError as exc:
            logger.warning("Error fetching previous visits for %s: %s", patient.mrn, exc)
            if self._visit_requests.is_current(token):
                self.notify_error("Failed to fetch previous visits")
            return
        self.receive_visits(token, visits)

    def receive_visits(self, token: int, visits: List[Visit]) -> bool:
        if not self._visit_requests.is_current(token):
            logger.debug("Dropping stale visit history response %d", token)
            return False
        self.previous_visits = list(visits)
        return True

    # ── discharge ──────────────────────────────────────────────────────────

    def submit(self) -> bool:
        """Discharge the selected patient. Local state only changes on success."""
        patient = self.selected
        try:
            self.service.discharge(
                patient.mrn if patient else None,
                self.form.discharge_date,
                self.form.discharge_time,
                self.form.discharge_note,
                visit_id=patient.id if patient else None,
            )
        except DischargeValidationError as exc:
            self.notify_error(exc.message)
            return False
        except BackendError as exc:
            logger.warning("Error discharging patient: %s", exc)
            self.notify_error("Failed to discharge patient")
            return False

        self.notify_success(f"Patient {patient.patient_name} has been successfully discharged.")
        self.patients = [p for p in self.patients if p.id != patient.id]
        self.selected = None
        self.form = DischargeForm()
        self.previous_visits = []
        # Visit history still in flight belongs to the patient just discharged
        self._visit_requests.issue()
        return True
