from clinical_ingest.models.tables import (
    Base, Patient, Doctor, Visit, Diagnosis, Medication, LabResult, Observation, ENTITY_MODELS,
)
