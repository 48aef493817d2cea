"""
Demo data seeder for Ward Manager.

Admissions are created outside this service; for local development the SQL
backend is pre-filled with a small ward: a few active patients admitted today
and yesterday, one patient discharged an hour ago (still inside the census
visibility window), an older visit for a returning patient, and a daily
report for today.

This seeder is idempotent, so it is safe to call on every startup.
"""
import logging
from datetime import time, timedelta

from .models.base import SessionLocal, Base, engine, generate_uuid, utcnow
from .models.daily_report import DailyReport
from .models.patient import Patient, PatientStatus, Specialty

logger = logging.getLogger(__name__)

DEMO_RETURNING_MRN = "DEMO-MRN-001"

# (mrn, name, days before today, admission time, specialty, diagnosis)
DEMO_ACTIVE_PATIENTS = [
    (DEMO_RETURNING_MRN, "John Demo", 0, time(8, 30), Specialty.NEUROLOGY, "Ischaemic stroke"),
    ("DEMO-MRN-002", "Mary Sample", 0, time(11, 15), Specialty.RESPIRATORY_MEDICINE, "Community-acquired pneumonia"),
    ("DEMO-MRN-003", "Ahmed Example", 1, time(22, 5), Specialty.GENERAL_INTERNAL_MEDICINE, "Syncope"),
]
DEMO_DISCHARGED_MRN = "DEMO-MRN-004"


def seed_demo_data() -> None:
    """Create the demo ward if it does not already exist."""
    # Ensure tables exist (no-op when already created by main.py)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(Patient).filter(Patient.mrn.like("DEMO-MRN-%")).first():
            return
        _seed_patients(db)
        _seed_daily_report(db)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _seed_patients(db) -> None:
    now = utcnow()
    today = now.date()
    for mrn, name, days_ago, admitted_at, specialty, diagnosis in DEMO_ACTIVE_PATIENTS:
        db.add(Patient(
            id=generate_uuid(),
            mrn=mrn,
            patient_name=name,
            admission_date=today - timedelta(days=days_ago),
            admission_time=admitted_at,
            patient_status=PatientStatus.ACTIVE,
            specialty=specialty,
            diagnosis=diagnosis,
        ))

    # Earlier visit of the returning patient
    db.add(Patient(
        id=generate_uuid(),
        mrn=DEMO_RETURNING_MRN,
        patient_name="John Demo",
        admission_date=today - timedelta(days=90),
        admission_time=time(14, 0),
        patient_status=PatientStatus.DISCHARGED,
        specialty=Specialty.NEUROLOGY,
        diagnosis="Transient ischaemic attack",
        discharge_note="Follow up in stroke clinic",
        updated_at=now - timedelta(days=86),
    ))

    db.add(Patient(
        id=generate_uuid(),
        mrn=DEMO_DISCHARGED_MRN,
        patient_name="Rosa Placeholder",
        admission_date=today,
        admission_time=time(6, 45),
        patient_status=PatientStatus.DISCHARGED,
        specialty=Specialty.SAFETY_ADMISSION,
        diagnosis="Alcohol intoxication",
        discharge_note="Stable, home care",
        updated_at=now - timedelta(hours=1),
    ))
    db.commit()
    logger.info("Seeded demo ward (%d patients)", len(DEMO_ACTIVE_PATIENTS) + 2)


def _seed_daily_report(db) -> None:
    db.add(DailyReport(
        report_id=generate_uuid(),
        patient_id=DEMO_RETURNING_MRN,
        report_date=utcnow().date(),
        report_content="Alert and oriented. Tolerating diet. Mobilising with physiotherapy.",
    ))
    db.commit()
