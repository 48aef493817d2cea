"""Tests for the daily census document model and PDF export."""
from datetime import date

from ward_manager.schemas import CensusPatient
from ward_manager.services.report_generator import (
    CensusReportGenerator,
    build_census_document,
    report_filename,
)


def _census():
    return [
        CensusPatient(
            mrn="A100",
            patient_name="Alice Walker",
            admission_date=date(2024, 1, 1),
            specialty="Neurology",
            patient_status="Active",
            diagnosis="Migraine",
        ),
        CensusPatient(
            mrn="B200",
            patient_name="Bob Stone",
            admission_date=date(2024, 1, 1),
            specialty="Immunology & Allergy",
            patient_status="Discharged",
            diagnosis=None,
        ),
    ]


class TestCensusDocument:
    def test_title_and_date_line(self):
        doc = build_census_document(_census(), date(2024, 1, 1))
        assert doc.title == "Daily Patient Report"
        assert doc.subtitles == ["Date: 2024-01-01"]

    def test_specialty_line_when_filtered(self):
        doc = build_census_document(_census(), "2024-01-01", "Neurology")
        assert doc.subtitles == ["Date: 2024-01-01", "Specialty: Neurology"]

    def test_fixed_columns(self):
        doc = build_census_document(_census(), date(2024, 1, 1))
        assert doc.header == ["MRN", "Patient Name", "Specialty", "Status", "Diagnosis"]
        assert doc.rows[0] == ["A100", "Alice Walker", "Neurology", "Active", "Migraine"]
        assert doc.rows[1] == ["B200", "Bob Stone", "Immunology & Allergy", "Discharged", ""]

    def test_row_order_follows_input(self):
        doc = build_census_document(list(reversed(_census())), date(2024, 1, 1))
        assert [row[0] for row in doc.rows] == ["B200", "A100"]

    def test_deterministic(self):
        assert build_census_document(_census(), date(2024, 1, 1)) == build_census_document(_census(), date(2024, 1, 1))

    def test_empty_census_keeps_header(self):
        doc = build_census_document([], date(2024, 1, 1))
        assert doc.rows == []
        assert len(doc.header) == 5


class TestReportFilename:
    def test_date_only(self):
        assert report_filename(date(2024, 1, 1)) == "daily_report_2024-01-01.pdf"

    def test_with_specialty(self):
        assert report_filename("2024-01-01", "Neurology") == "daily_report_2024-01-01_Neurology.pdf"


class TestCensusReportGenerator:
    def setup_method(self):
        self.gen = CensusReportGenerator()

    def test_generates_valid_pdf_bytes(self):
        pdf = self.gen.generate(_census(), date(2024, 1, 1), "Neurology")
        assert isinstance(pdf, bytes)
        assert pdf[:5] == b"%PDF-"
        assert len(pdf) > 500

    def test_empty_census_returns_pdf(self):
        """Even with no patients, the title and header row are rendered."""
        pdf = self.gen.generate([], date(2024, 1, 1))
        assert pdf[:5] == b"%PDF-"

    def test_many_rows_span_pages(self):
        patients = [
            CensusPatient(
                mrn=f"M{i:03d}",
                patient_name=f"Patient {i}",
                admission_date=date(2024, 1, 1),
                specialty="General Internal Medicine",
                patient_status="Active",
                diagnosis="Observation after a fall with a long free-text diagnosis",
            )
            for i in range(80)
        ]
        pdf = self.gen.generate(patients, date(2024, 1, 1))
        assert pdf.count(b"/Type /Page") > 2
