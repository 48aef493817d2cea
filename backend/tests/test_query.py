from datetime import date, datetime

import pytest

from ward_manager.core.errors import QueryError
from ward_manager.models.patient import Patient
from ward_manager.services.lifecycle import census_source_query
from ward_manager.services.query import Query, and_, eq, gte, or_, to_postgrest, to_sqlalchemy


class TestPostgrestTranslation:
    def test_equality_and_order(self):
        query = Query().eq("patient_status", "Active").order_by("admission_date")
        assert to_postgrest(query) == [
            ("patient_status", "eq.Active"),
            ("order", "admission_date.desc"),
        ]

    def test_ascending_order(self):
        query = Query().order_by("created_at", descending=False)
        assert to_postgrest(query) == [("order", "created_at.asc")]

    def test_census_source_or_clause(self):
        query = census_source_query(datetime(2024, 1, 3, 10, 0), hours=48)
        params = dict(to_postgrest(query))
        assert params["or"] == (
            "(patient_status.eq.Active,"
            "and(patient_status.eq.Discharged,updated_at.gte.2024-01-01T10:00:00))"
        )
        assert params["order"] == "admission_date.desc"

    def test_range_emits_both_bounds(self):
        query = Query().range("admission_date", date(2024, 1, 1), date(2024, 1, 31))
        assert to_postgrest(query) == [
            ("admission_date", "gte.2024-01-01"),
            ("admission_date", "lte.2024-01-31"),
        ]

    def test_range_with_open_upper_bound(self):
        query = Query().range("admission_date", lower=date(2024, 1, 1))
        assert to_postgrest(query) == [("admission_date", "gte.2024-01-01")]

    def test_reserved_characters_quoted_inside_groups(self):
        query = Query().or_(eq("specialty", "Immunology, Allergy"), eq("specialty", "Neurology"))
        assert to_postgrest(query) == [
            ("or", '(specialty.eq."Immunology, Allergy",specialty.eq.Neurology)'),
        ]

    def test_backslash_escaped_inside_quoted_value(self):
        query = Query().or_(eq("diagnosis", 'C:\\notes, "old"'), eq("diagnosis", "back\\slash"))
        assert to_postgrest(query) == [
            ("or", '(diagnosis.eq."C:\\\\notes, \\"old\\"",diagnosis.eq."back\\\\slash")'),
        ]

    def test_columns_lists_filters_and_ordering(self):
        query = Query().or_(eq("mrn", "A100"), and_(eq("patient_status", "Discharged"), gte("updated_at", 1)))
        query.order_by("admission_date")
        assert query.columns() == ["mrn", "patient_status", "updated_at", "admission_date"]


class TestSqlAlchemyTranslation:
    def test_criteria_and_ordering_count(self):
        query = Query().eq("mrn", "A100").gte("admission_date", date(2024, 1, 1)).order_by("admission_date")
        criteria, ordering = to_sqlalchemy(query, Patient)
        assert len(criteria) == 2
        assert len(ordering) == 1

    def test_or_group_compiles(self):
        query = Query().where(or_(eq("patient_status", "Active"), eq("mrn", "A100")))
        criteria, _ = to_sqlalchemy(query, Patient)
        compiled = str(criteria[0])
        assert "OR" in compiled
        assert "patients.patient_status" in compiled

    def test_unknown_column_raises(self):
        with pytest.raises(QueryError):
            to_sqlalchemy(Query().eq("ward_bed", 3), Patient)

    def test_unknown_order_column_raises(self):
        with pytest.raises(QueryError):
            to_sqlalchemy(Query().order_by("bed_number"), Patient)
