
from pathlib import Path
import os
from dotenv import load_dotenv

load_dotenv()

# project paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
DATA_DIR = Path(os.getenv("INGEST_DATA_DIR", BASE_DIR / "data"))
RAW_DIR  = DATA_DIR / "raw"
LOGS_DIR = DATA_DIR / "logs"

# input files, one per entity type
SOURCE_FILES = {
    "Patient":     "patients.csv",
    "Doctor":      "doctors.csv",
    "Visit":       "visits.csv",
    "Diagnosis":   "diagnoses.csv",
    "Medication":  "medications.csv",
    "LabResult":   "lab_results.csv",
    "Observation": "reports.csv",
}

# outputs
REPORT_FILE = "reconciliation_report.csv"
REJECTS_SUFFIX = "_rejects.csv"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Database
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5433")
DB_NAME = os.getenv("DB_NAME")


def get_database_url() -> str:
    """DATABASE_URL wins; otherwise build a PostgreSQL URL from the DB_* variables."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if not all([DB_USER, DB_PASSWORD, DB_NAME]):
        raise ValueError("Missing required DB environment variables")
    return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
