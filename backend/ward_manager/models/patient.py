from sqlalchemy import Column, String, Date, Time, Text
from .base import Base, TimestampMixin, generate_uuid


class PatientStatus:
    ACTIVE = "Active"
    DISCHARGED = "Discharged"

    ALL = [ACTIVE, DISCHARGED]


class Specialty:
    GENERAL_INTERNAL_MEDICINE = "General Internal Medicine"
    RESPIRATORY_MEDICINE = "Respiratory Medicine"
    INFECTIOUS_DISEASES = "Infectious Diseases"
    NEUROLOGY = "Neurology"
    GASTROENTEROLOGY = "Gastroenterology"
    RHEUMATOLOGY = "Rheumatology"
    HEMATOLOGY = "Hematology"
    THROMBOSIS_MEDICINE = "Thrombosis Medicine"
    IMMUNOLOGY_ALLERGY = "Immunology & Allergy"
    SAFETY_ADMISSION = "Safety Admission"

    ALL = [
        GENERAL_INTERNAL_MEDICINE, RESPIRATORY_MEDICINE, INFECTIOUS_DISEASES,
        NEUROLOGY, GASTROENTEROLOGY, RHEUMATOLOGY, HEMATOLOGY,
        THROMBOSIS_MEDICINE, IMMUNOLOGY_ALLERGY, SAFETY_ADMISSION,
    ]


class Patient(Base, TimestampMixin):
    """One admission (visit) row. Rows of the same person share an MRN."""
    __tablename__ = "patients"

    id = Column(String, primary_key=True, default=generate_uuid)
    mrn = Column(String(50), nullable=False, index=True)  # Medical Record Number
    patient_name = Column(String(200), nullable=False)
    admission_date = Column(Date, nullable=False, index=True)
    admission_time = Column(Time, nullable=True)
    patient_status = Column(String(20), nullable=False, default=PatientStatus.ACTIVE, index=True)
    specialty = Column(String(100), nullable=True)
    diagnosis = Column(Text, nullable=True)
    discharge_note = Column(Text, nullable=True)
