from __future__ import annotations

import pytest

from docugen.core.values import JsonValue, from_json


PATIENT = {
    "resourceType": "Patient",
    "id": "8f789d0b-3145-4cf2-8504-13159edaa747",
    "active": True,
    "name": [
        {"use": "official", "family": "Lovelace", "given": ["Ada", "Augusta"]},
    ],
    "gender": "female",
    "birthDate": "1815-12-10",
    "deceasedDateTime": "1852-11-27T00:00:00Z",
    "multipleBirthInteger": 1,
    "weight": 54.25,
    "telecom": [],
    "maritalStatus": None,
}


@pytest.fixture
def patient() -> JsonValue:
    """A FHIR Patient resource as a value tree."""
    return from_json(PATIENT)


@pytest.fixture
def bundle_array() -> JsonValue:
    """Search result as served by the API: an array of Bundles."""
    return from_json(
        [
            {
                "resourceType": "Bundle",
                "id": "123",
                "entry": [
                    {"resource": {"name": [{"given": ["A"], "family": "B"}], "birthDate": "1234-12-12"}},
                ],
            },
            {
                "resourceType": "Bundle",
                "id": "124",
                "entry": [
                    {"resource": {"name": [{"given": ["C"], "family": "D"}], "birthDate": "1990-01"}},
                ],
            },
        ]
    )
