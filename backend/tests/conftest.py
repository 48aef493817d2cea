"""Shared fixtures: an isolated in-memory SQLite ward and a controllable clock."""
from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ward_manager.core.config import Settings
from ward_manager.models.base import Base, generate_uuid
from ward_manager.models.daily_report import DailyReport
from ward_manager.models.patient import Patient, PatientStatus, Specialty
from ward_manager.services.backend import SqlBackend
from ward_manager.services.ward import WardService

NOW = datetime(2024, 1, 3, 10, 0)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def session_factory():
    """Provide an isolated in-memory SQLite database for each test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def ward_settings():
    return Settings(
        _env_file=None,
        WARD_BACKEND="sql",
        WARD_TIMEZONE="UTC",
        DISCHARGE_VISIBILITY_HOURS=48,
        DISCHARGE_REQUIRE_ACTIVE=False,
        DISPLAY_DATE_FORMAT="%m/%d/%Y",
    )


@pytest.fixture()
def service(session_factory, ward_settings, clock):
    return WardService(SqlBackend(session_factory), ward_settings, clock)


@pytest.fixture()
def add_patient(db):
    def _add(
        mrn: str,
        patient_name: str = "Test Patient",
        admission_date: date = date(2024, 1, 1),
        admission_time: time = time(9, 0),
        patient_status: str = PatientStatus.ACTIVE,
        specialty: str = Specialty.GENERAL_INTERNAL_MEDICINE,
        diagnosis: str = "Observation",
        updated_at: datetime = None,
    ) -> Patient:
        patient = Patient(
            id=generate_uuid(),
            mrn=mrn,
            patient_name=patient_name,
            admission_date=admission_date,
            admission_time=admission_time,
            patient_status=patient_status,
            specialty=specialty,
            diagnosis=diagnosis,
            updated_at=updated_at,
        )
        db.add(patient)
        db.commit()
        return patient

    return _add


@pytest.fixture()
def add_report(db):
    def _add(patient_id: str, report_date: date, content: str, created_at: datetime) -> DailyReport:
        report = DailyReport(
            report_id=generate_uuid(),
            patient_id=patient_id,
            report_date=report_date,
            report_content=content,
            created_at=created_at,
        )
        db.add(report)
        db.commit()
        return report

    return _add
