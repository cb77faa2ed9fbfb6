"""
ORM models for the clinical records store.
Primary keys are UUID strings assigned at insert time.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import (
    Column, String, Float, DateTime, Date, Integer, ForeignKey, Text
)

def _new_id() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

class Base(DeclarativeBase):
    pass

class Patient(Base):
    __tablename__ = "patients"

    patient_id = Column(String(36), primary_key=True, default=_new_id)
    name       = Column(String(200), nullable=False)
    dob        = Column(Date, nullable=False)
    gender     = Column(String(20))
    contact    = Column(String(255))
    insurance  = Column(String(255))
    created_at = Column(DateTime, default=_now)

class Doctor(Base):
    __tablename__ = "doctors"

    doctor_id  = Column(String(36), primary_key=True, default=_new_id)
    name       = Column(String(200), nullable=False)
    department = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=_now)

class Visit(Base):
    __tablename__ = "visits"

    visit_id   = Column(String(36), primary_key=True, default=_new_id)
    patient_id = Column(String(36), ForeignKey("patients.patient_id"), nullable=False)
    doctor_id  = Column(String(36), ForeignKey("doctors.doctor_id"), nullable=False)
    visit_date = Column(DateTime, nullable=False)
    department = Column(String(100))
    reason     = Column(Text)
    created_at = Column(DateTime, default=_now)

class Diagnosis(Base):
    __tablename__ = "diagnoses"

    diagnosis_id = Column(String(36), primary_key=True, default=_new_id)
    visit_id     = Column(String(36), ForeignKey("visits.visit_id"), nullable=False)
    diagnosis    = Column(Text, nullable=False)
    created_at   = Column(DateTime, default=_now)

class Medication(Base):
    __tablename__ = "medications"

    med_id       = Column(String(36), primary_key=True, default=_new_id)
    visit_id     = Column(String(36), ForeignKey("visits.visit_id"), nullable=False)
    drug_name    = Column(String(200), nullable=False)
    dosage       = Column(String(100))
    instructions = Column(Text)
    created_at   = Column(DateTime, default=_now)

class LabResult(Base):
    __tablename__ = "lab_results"

    lab_id          = Column(String(36), primary_key=True, default=_new_id)
    visit_id        = Column(String(36), ForeignKey("visits.visit_id"), nullable=False)
    test_name       = Column(String(200), nullable=False)
    result_value    = Column(Float)
    unit            = Column(String(50))
    reference_range = Column(String(100))
    test_date       = Column(DateTime)     # nullable, still part of the natural key
    created_at      = Column(DateTime, default=_now)

class Observation(Base):
    __tablename__ = "observations"

    obs_id        = Column(String(36), primary_key=True, default=_new_id)
    visit_id      = Column(String(36), ForeignKey("visits.visit_id"), nullable=False)
    patient_id    = Column(String(36), ForeignKey("patients.patient_id"), nullable=False)
    doctor_id     = Column(String(36), ForeignKey("doctors.doctor_id"), nullable=False)
    note_text     = Column(Text, nullable=False)
    bp_systolic   = Column(Integer)
    bp_diastolic  = Column(Integer)
    heart_rate    = Column(Integer)
    temperature_c = Column(Float)
    spo2          = Column(Integer)
    bmi           = Column(Float)
    created_at    = Column(DateTime, nullable=False)

# entity type name -> model, in stage order
ENTITY_MODELS = {
    "Patient":     Patient,
    "Doctor":      Doctor,
    "Visit":       Visit,
    "Diagnosis":   Diagnosis,
    "Medication":  Medication,
    "LabResult":   LabResult,
    "Observation": Observation,
}
