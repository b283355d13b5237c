"""Tests for the runtime client validation schema."""

import pytest

from placement_forms.services.client_schema import (
    client_json_schema, generate_client_schema, validate_client_input
)

from tests.conftest import make_field


FIELDS = [
    make_field(id="name", label="Full Name", field_type="text", required=True),
    make_field(id="mail", label="Email", field_type="email", required=True),
    make_field(id="cgpa", label="CGPA", field_type="number", required=True),
    make_field(id="dob", label="Date of Birth", field_type="date"),
    make_field(id="branch", label="Branch", field_type="select",
               options=[{"label": "CSE", "value": "cse"}]),
    make_field(id="resume", label="Resume", field_type="file", required=True),
]

VALID = {
    "name": "Asha Rao",
    "mail": "asha@college.edu",
    "cgpa": "8.5",
    "dob": "2003-05-17",
    "branch": "cse",
}


def test_schema_is_deterministic():
    first = client_json_schema(FIELDS)
    second = client_json_schema(FIELDS)

    assert first == second
    assert list(first["properties"]) == ["name", "mail", "cgpa", "dob", "branch", "resume"]


def test_required_fields_listed_by_id():
    schema = client_json_schema(FIELDS)

    # outside a file-handle context file fields are never required
    assert schema["required"] == ["name", "mail", "cgpa"]


def test_valid_input_accepted():
    assert validate_client_input(FIELDS, VALID) == {}


def test_number_strings_are_coerced():
    model = generate_client_schema(FIELDS)
    parsed = model.model_validate(VALID)

    assert parsed.field_2 == 8.5


def test_required_text_rejects_empty_string():
    errors = validate_client_input(FIELDS, {**VALID, "name": ""})

    assert errors == {"name": ["This field is required"]}


def test_missing_required_field():
    data = dict(VALID)
    del data["cgpa"]

    assert validate_client_input(FIELDS, data) == {"cgpa": ["This field is required"]}


def test_type_messages():
    errors = validate_client_input(FIELDS, {
        **VALID,
        "mail": "not-an-email",
        "cgpa": "eight",
        "dob": "17/05/2003",
    })

    assert errors == {
        "mail": ["Invalid email address"],
        "cgpa": ["Must be a number"],
        "dob": ["Invalid date format (YYYY-MM-DD)"],
    }


def test_optional_fields_accept_absence_and_blank():
    data = {"name": "Asha", "mail": "asha@college.edu", "cgpa": 9, "dob": ""}

    assert validate_client_input(FIELDS, data) == {}


def test_file_handles_required_selection():
    errors = validate_client_input(FIELDS, {**VALID, "resume": []}, file_handles=True)

    assert errors == {"resume": ["This field is required"]}
    assert validate_client_input(FIELDS, {**VALID, "resume": ["cv.pdf"]}, file_handles=True) == {}


def test_file_without_handles_is_permissive():
    assert validate_client_input(FIELDS, {**VALID, "resume": "https://files.example.com/cv.pdf"}) == {}


def test_unknown_keys_ignored():
    assert validate_client_input(FIELDS, {**VALID, "extra": "ignored"}) == {}


@pytest.mark.parametrize("value", ["NaN", "nan", "inf", "-Infinity", "1e999", float("inf")])
def test_non_finite_numbers_rejected(value):
    assert validate_client_input(FIELDS, {**VALID, "cgpa": value}) == {"cgpa": ["Must be a number"]}
