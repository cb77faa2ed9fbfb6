"""
Tests for the legacy id resolver
"""
from clinical_ingest.load.identity import IdentityResolver


def test_record_then_resolve():
    r = IdentityResolver()
    r.record("Patient", "p1", "uuid-1")

    assert r.resolve("Patient", "p1") == "uuid-1"


def test_unknown_is_unresolvable():
    r = IdentityResolver()

    assert r.resolve("Patient", "p1") is None
    assert r.resolve("Patient", None) is None


def test_empty_legacy_id_is_noop():
    r = IdentityResolver()
    r.record("Patient", "", "uuid-1")
    r.record("Patient", None, "uuid-2")

    assert r.known("Patient") == 0


def test_scoped_per_entity_type():
    r = IdentityResolver()
    r.record("Patient", "1", "patient-uuid")
    r.record("Doctor", "1", "doctor-uuid")

    assert r.resolve("Patient", "1") == "patient-uuid"
    assert r.resolve("Doctor", "1") == "doctor-uuid"
    assert r.resolve("Visit", "1") is None
    assert r.known("Patient") == 1


def test_last_mapping_wins():
    r = IdentityResolver()
    r.record("Visit", "v1", "a")
    r.record("Visit", "v1", "b")

    assert r.resolve("Visit", "v1") == "b"
