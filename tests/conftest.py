"""Pytest configuration and fixtures for Synduct Insights tests."""

import json
import pytest
from datetime import date, datetime, timezone


@pytest.fixture
def make_record():
    """Factory for records with sensible defaults; keyword args override fields."""
    from src.filtering.models import Record

    def _make(**overrides):
        fields = {
            "specialty": "Oncology",
            "professional_role": "Physician",
            "country": "Germany",
            "timestamp": "2024-03-01T12:00:00+00:00",
            "drug_names": ("A",),
            "therapeutic_areas": ("Oncology",),
        }
        fields.update(overrides)
        return Record(**fields)

    return _make


@pytest.fixture
def sample_records(make_record):
    """Five records spread over Jan-Mar 2024 across three countries."""
    return (
        make_record(
            id="r1",
            timestamp="2024-01-10T10:00:00+00:00",
            drug_names=("A", "B"),
            therapeutic_areas=("Oncology",),
            country="Germany",
            citation_count=2,
            doi_list=("10.1/d1", "10.1/d2"),
            manufacturers=("Acme",),
        ),
        make_record(
            id="r2",
            timestamp="2024-01-20T10:00:00+00:00",
            specialty="Cardiology",
            country="France",
            drug_names=("B",),
            therapeutic_areas=("Cardiology",),
            predicted_age_group="elderly",
            predicted_gender="male",
            manufacturers=("Beta",),
        ),
        make_record(
            id="r3",
            timestamp="2024-02-05T10:00:00+00:00",
            professional_role="Nurse Practitioner",
            country="Germany",
            drug_names=("A",),
            therapeutic_areas=("Oncology", "Immunology"),
            predicted_gender="female",
            citation_count=1,
            doi_list=("10.1/d1",),
            manufacturers=("Acme",),
        ),
        make_record(
            id="r4",
            timestamp="2024-02-15T10:00:00+00:00",
            specialty="Pediatrics",
            country="UK",
            drug_names=("C",),
            therapeutic_areas=("Immunology",),
            predicted_age_group="child",
            citation_count=3,
            doi_list=("10.1/d3",),
            manufacturers=("Gamma",),
        ),
        make_record(
            id="r5",
            timestamp="2024-03-01T10:00:00+00:00",
            country="France",
            drug_names=("A", "C"),
            therapeutic_areas=("Oncology",),
            manufacturers=("Acme", "Gamma"),
        ),
    )


@pytest.fixture
def today():
    """Fixed reference day for date defaults."""
    return date(2024, 6, 30)


@pytest.fixture
def as_of():
    """Fixed reference instant for window computations."""
    return datetime(2024, 3, 31, tzinfo=timezone.utc)


@pytest.fixture
def records_file(tmp_path, sample_records):
    """Write the sample records to a JSON file and return its path."""
    path = tmp_path / "records.json"
    path.write_text(json.dumps([r.to_dict() for r in sample_records]))
    return path
