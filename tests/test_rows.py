"""
Tests for per-entity row validation and value parsing
"""
from datetime import date, datetime
import pytest
from clinical_ingest.core.errors import RowRejected
from clinical_ingest.transforms.rows import (
    PatientRow, VisitRow, MedicationRow, LabResultRow, ObservationRow,
    parse_datetime, parse_int, parse_float,
)


def test_parse_datetime_is_naive_utc():
    assert parse_datetime("2024-03-01T09:30:00Z") == datetime(2024, 3, 1, 9, 30)
    assert parse_datetime("2024-03-01") == datetime(2024, 3, 1)


def test_parse_datetime_blank_is_none():
    assert parse_datetime("") is None
    assert parse_datetime(None) is None


def test_parse_datetime_garbage_rejects():
    with pytest.raises(RowRejected):
        parse_datetime("not-a-date")


def test_numbers_blank_or_garbage_are_none_not_zero():
    assert parse_int("") is None
    assert parse_int("abc") is None
    assert parse_float(" ") is None
    assert parse_float("n/a") is None


def test_numbers_parse():
    assert parse_int("72") == 72
    assert parse_int("98.0") == 98
    assert parse_float("36.6") == pytest.approx(36.6)


def test_patient_row():
    row = PatientRow.from_record(
        {"patientId": "p1", "name": "A", "dob": "2000-01-01", "gender": "Female", "contact": "", "insurance": "X"}
    )

    assert row.natural_key({}) == {"name": "A", "dob": date(2000, 1, 1)}
    assert row.update_fields() == {"gender": "Female", "contact": None, "insurance": "X"}
    assert row.legacy_id == "p1"


def test_patient_without_dob_rejected():
    with pytest.raises(RowRejected):
        PatientRow.from_record({"name": "A", "dob": ""})


def test_patient_with_bad_dob_rejected():
    with pytest.raises(RowRejected):
        PatientRow.from_record({"name": "A", "dob": "31/31/2000"})


def test_visit_references():
    row = VisitRow.from_record({"visitId": "v1", "patientId": "p1", "doctorId": "d1", "visitDate": "2024-01-02"})

    assert row.references() == {"patient_id": ("Patient", "p1"), "doctor_id": ("Doctor", "d1")}


def test_medication_prefers_drug_name_column():
    row = MedicationRow.from_record({"visitId": "v1", "drugName": "Metformin", "drug": "Aspirin"})

    assert row.drug_name == "Metformin"


def test_medication_falls_back_to_drug_column():
    row = MedicationRow.from_record({"visitId": "v1", "drug": "Aspirin"})

    assert row.drug_name == "Aspirin"


def test_medication_without_any_drug_rejected():
    with pytest.raises(RowRejected):
        MedicationRow.from_record({"visitId": "v1", "drugName": "", "drug": ""})


def test_lab_blank_test_date_is_null_key():
    row = LabResultRow.from_record({"visitId": "v1", "testName": "LDL", "testDate": "", "resultValue": ""})

    assert row.natural_key({"visit_id": "x"}) == {"visit_id": "x", "test_name": "LDL", "test_date": None}
    assert row.result_value is None


def test_observation_supplies_its_own_id():
    row = ObservationRow.from_record({
        "obsId": "obs-9", "visitId": "v1", "patientId": "p1", "doctorId": "d1",
        "noteText": "ok", "heartRate": "", "createdAt": "2024-03-01T10:00:00Z",
    })

    assert row.assigned_id() == "obs-9"
    assert row.heart_rate is None
    assert set(row.references()) == {"visit_id", "patient_id", "doctor_id"}


def test_int_out_of_column_range_is_none():
    assert parse_int("1e20") is None
    assert parse_int("-3000000000") is None
    assert parse_int("2147483647") == 2147483647


def test_row_type_must_define_natural_key():
    from dataclasses import dataclass
    from clinical_ingest.transforms.rows import SourceRow

    @dataclass
    class Incomplete(SourceRow):
        name: str

        @classmethod
        def from_record(cls, rec):
            return cls(name=rec["name"])

    with pytest.raises(TypeError):
        Incomplete.from_record({"name": "x"})
