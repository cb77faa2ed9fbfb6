"""
Shared fixtures: a throwaway SQLite store and CSV source writers.
"""
from pathlib import Path
import pytest
from clinical_ingest.core.db import get_engine, create_tables, session_scope
from clinical_ingest.core.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Drop handlers a CLI test attached to captured streams."""
    yield
    reset_logging()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'clinical.db'}"


@pytest.fixture
def engine(db_url):
    eng = create_tables(get_engine(db_url))
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with session_scope(engine) as s:
        yield s


def write_csv(path: Path, text: str) -> Path:
    """Write dedented CSV text (first line is the header)."""
    lines = [line.strip() for line in text.strip().splitlines()]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


PATIENTS_CSV = """
patientId,name,dob,gender,contact,insurance
p1,A,2000-01-01,Female,555-0100,Acme
"""

DOCTORS_CSV = """
doctorId,name,department
d1,B,Cardiology
"""

VISITS_CSV = """
visitId,patientId,doctorId,visitDate,department,reason
v1,p1,d1,2024-03-01T09:30:00Z,Cardiology,Chest pain
"""

DIAGNOSES_CSV = """
visitId,diagnosis
v1,Hypertension
"""

MEDICATIONS_CSV = """
visitId,drugName,dosage,instructions
v1,Lisinopril,10mg,Once daily
"""

LAB_RESULTS_CSV = """
visitId,testName,resultValue,unit,referenceRange,testDate
v1,LDL,130,mg/dL,<100,2024-03-01
"""

REPORTS_CSV = """
obsId,visitId,patientId,doctorId,noteText,bpSystolic,bpDiastolic,heartRate,temperatureC,spo2,bmi,createdAt
obs-1,v1,p1,d1,Follow up in 2 weeks,140,90,72,36.8,98,27.4,2024-03-01T10:00:00Z
"""


@pytest.fixture
def raw_dir(tmp_path):
    """A raw/ directory holding one small CSV per entity type."""
    raw = tmp_path / "data" / "raw"
    write_csv(raw / "patients.csv", PATIENTS_CSV)
    write_csv(raw / "doctors.csv", DOCTORS_CSV)
    write_csv(raw / "visits.csv", VISITS_CSV)
    write_csv(raw / "diagnoses.csv", DIAGNOSES_CSV)
    write_csv(raw / "medications.csv", MEDICATIONS_CSV)
    write_csv(raw / "lab_results.csv", LAB_RESULTS_CSV)
    write_csv(raw / "reports.csv", REPORTS_CSV)
    return raw
