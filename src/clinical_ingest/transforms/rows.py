"""
Validated row structures, one per entity type.

Each row class turns a raw source record into typed values and knows how to
split itself into the natural key, the fields written on create and the
fields rewritten on update. Records that cannot become a row raise
RowRejected; the orchestrator drops them and moves on.
"""

from __future__ import annotations
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
import pandas as pd
from clinical_ingest.core.errors import RowRejected

# helpers
def _text(rec: dict, col: str) -> str | None:
    s = str(rec.get(col) or "").strip()
    return s or None

def _required(rec: dict, col: str) -> str:
    s = _text(rec, col)
    if s is None:
        raise RowRejected(f"MISSING_{col.upper()}")
    return s

def parse_datetime(value) -> datetime | None:
    """Naive UTC datetime, None for blank text. Unparsable text rejects the row."""
    s = str(value or "").strip()
    if not s:
        return None
    ts = pd.to_datetime(s, errors="coerce", utc=True)
    if pd.isna(ts):
        raise RowRejected(f"INVALID_DATE: {s!r}")
    return ts.tz_convert(None).to_pydatetime()

def _required_datetime(rec: dict, col: str) -> datetime:
    dt = parse_datetime(rec.get(col))
    if dt is None:
        raise RowRejected(f"MISSING_{col.upper()}")
    return dt

def _number(value) -> float | None:
    s = str(value or "").strip()
    if not s:
        return None
    n = pd.to_numeric(s, errors="coerce")
    if pd.isna(n) or not math.isfinite(n):
        return None
    return float(n)

def parse_float(value) -> float | None:
    return _number(value)

# signed 32-bit, the range of the Integer columns
INT_MIN, INT_MAX = -2**31, 2**31 - 1

def parse_int(value) -> int | None:
    n = _number(value)
    if n is None or not (INT_MIN <= n <= INT_MAX):
        return None
    return int(n)


class SourceRow(ABC):
    """Interface shared by the per-entity rows."""

    ENTITY: str = ""
    legacy_id: str | None = None

    @classmethod
    @abstractmethod
    def from_record(cls, rec: dict) -> "SourceRow":
        ...

    def references(self) -> dict[str, tuple[str, str | None]]:
        """column -> (parent entity type, legacy id found on this row)"""
        return {}

    @abstractmethod
    def natural_key(self, refs: dict[str, str]) -> dict:
        ...

    def create_fields(self, refs: dict[str, str]) -> dict:
        return {}

    def update_fields(self) -> dict:
        return {}

    def assigned_id(self) -> str | None:
        return None


@dataclass
class PatientRow(SourceRow):
    ENTITY = "Patient"

    name: str
    dob: date
    gender: str | None = None
    contact: str | None = None
    insurance: str | None = None
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            name=_required(rec, "name"),
            dob=_required_datetime(rec, "dob").date(),
            gender=_text(rec, "gender"),
            contact=_text(rec, "contact"),
            insurance=_text(rec, "insurance"),
            legacy_id=_text(rec, "patientId"),
        )

    def natural_key(self, refs):
        return {"name": self.name, "dob": self.dob}

    def create_fields(self, refs):
        return self.update_fields()

    def update_fields(self):
        return {"gender": self.gender, "contact": self.contact, "insurance": self.insurance}


@dataclass
class DoctorRow(SourceRow):
    ENTITY = "Doctor"

    name: str
    department: str
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            name=_required(rec, "name"),
            department=_required(rec, "department"),
            legacy_id=_text(rec, "doctorId"),
        )

    def natural_key(self, refs):
        return {"name": self.name, "department": self.department}


@dataclass
class VisitRow(SourceRow):
    ENTITY = "Visit"

    patient_ref: str | None
    doctor_ref: str | None
    visit_date: datetime
    department: str | None = None
    reason: str | None = None
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            patient_ref=_text(rec, "patientId"),
            doctor_ref=_text(rec, "doctorId"),
            visit_date=_required_datetime(rec, "visitDate"),
            department=_text(rec, "department"),
            reason=_text(rec, "reason"),
            legacy_id=_text(rec, "visitId"),
        )

    def references(self):
        return {"patient_id": ("Patient", self.patient_ref), "doctor_id": ("Doctor", self.doctor_ref)}

    def natural_key(self, refs):
        return {"patient_id": refs["patient_id"], "doctor_id": refs["doctor_id"], "visit_date": self.visit_date}

    def create_fields(self, refs):
        return self.update_fields()

    def update_fields(self):
        return {"department": self.department, "reason": self.reason}


@dataclass
class DiagnosisRow(SourceRow):
    ENTITY = "Diagnosis"

    visit_ref: str | None
    diagnosis: str
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            visit_ref=_text(rec, "visitId"),
            diagnosis=_required(rec, "diagnosis"),
            legacy_id=_text(rec, "diagnosisId"),
        )

    def references(self):
        return {"visit_id": ("Visit", self.visit_ref)}

    def natural_key(self, refs):
        return {"visit_id": refs["visit_id"], "diagnosis": self.diagnosis}


@dataclass
class MedicationRow(SourceRow):
    ENTITY = "Medication"

    visit_ref: str | None
    drug_name: str
    dosage: str | None = None
    instructions: str | None = None
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        # drugName wins over the older "drug" column
        drug_name = _text(rec, "drugName") or _text(rec, "drug")
        if drug_name is None:
            raise RowRejected("MISSING_DRUGNAME")
        return cls(
            visit_ref=_text(rec, "visitId"),
            drug_name=drug_name,
            dosage=_text(rec, "dosage"),
            instructions=_text(rec, "instructions"),
            legacy_id=_text(rec, "medicationId"),
        )

    def references(self):
        return {"visit_id": ("Visit", self.visit_ref)}

    def natural_key(self, refs):
        return {"visit_id": refs["visit_id"], "drug_name": self.drug_name}

    def create_fields(self, refs):
        return self.update_fields()

    def update_fields(self):
        return {"dosage": self.dosage, "instructions": self.instructions}


@dataclass
class LabResultRow(SourceRow):
    ENTITY = "LabResult"

    visit_ref: str | None
    test_name: str
    test_date: datetime | None = None
    result_value: float | None = None
    unit: str | None = None
    reference_range: str | None = None
    legacy_id: str | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            visit_ref=_text(rec, "visitId"),
            test_name=_required(rec, "testName"),
            test_date=parse_datetime(rec.get("testDate")),
            result_value=parse_float(rec.get("resultValue")),
            unit=_text(rec, "unit"),
            reference_range=_text(rec, "referenceRange"),
            legacy_id=_text(rec, "labId"),
        )

    def references(self):
        return {"visit_id": ("Visit", self.visit_ref)}

    def natural_key(self, refs):
        return {"visit_id": refs["visit_id"], "test_name": self.test_name, "test_date": self.test_date}

    def create_fields(self, refs):
        fields = self.update_fields()
        fields.pop("test_date")
        return fields

    def update_fields(self):
        return {
            "result_value": self.result_value,
            "unit": self.unit,
            "reference_range": self.reference_range,
            "test_date": self.test_date,
        }


@dataclass
class ObservationRow(SourceRow):
    ENTITY = "Observation"

    visit_ref: str | None
    patient_ref: str | None
    doctor_ref: str | None
    note_text: str
    created_at: datetime
    obs_id: str | None = None
    bp_systolic: int | None = None
    bp_diastolic: int | None = None
    heart_rate: int | None = None
    temperature_c: float | None = None
    spo2: int | None = None
    bmi: float | None = None

    @classmethod
    def from_record(cls, rec):
        return cls(
            visit_ref=_text(rec, "visitId"),
            patient_ref=_text(rec, "patientId"),
            doctor_ref=_text(rec, "doctorId"),
            note_text=_required(rec, "noteText"),
            created_at=_required_datetime(rec, "createdAt"),
            obs_id=_text(rec, "obsId"),
            bp_systolic=parse_int(rec.get("bpSystolic")),
            bp_diastolic=parse_int(rec.get("bpDiastolic")),
            heart_rate=parse_int(rec.get("heartRate")),
            temperature_c=parse_float(rec.get("temperatureC")),
            spo2=parse_int(rec.get("spo2")),
            bmi=parse_float(rec.get("bmi")),
        )

    @property
    def legacy_id(self):
        return self.obs_id

    def references(self):
        return {
            "visit_id": ("Visit", self.visit_ref),
            "patient_id": ("Patient", self.patient_ref),
            "doctor_id": ("Doctor", self.doctor_ref),
        }

    def natural_key(self, refs):
        return {"visit_id": refs["visit_id"], "note_text": self.note_text, "created_at": self.created_at}

    def create_fields(self, refs):
        return {"patient_id": refs["patient_id"], "doctor_id": refs["doctor_id"], **self.update_fields()}

    def update_fields(self):
        return {
            "bp_systolic": self.bp_systolic,
            "bp_diastolic": self.bp_diastolic,
            "heart_rate": self.heart_rate,
            "temperature_c": self.temperature_c,
            "spo2": self.spo2,
            "bmi": self.bmi,
        }

    def assigned_id(self):
        return self.obs_id


ROW_TYPES = {cls.ENTITY: cls for cls in (
    PatientRow, DoctorRow, VisitRow, DiagnosisRow, MedicationRow, LabResultRow, ObservationRow,
)}
