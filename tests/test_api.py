"""Tests for the HTTP API (admin builder, respondent forms, uploads)."""

from placement_forms.core.config import Settings

from tests.conftest import (
    OTHER_ADMIN_ID, OTHER_STUDENT_ID, STUDENT_ID, auth_headers, make_field, make_template
)


FORM_BODY = {
    "name": "Placement Drive 2024",
    "description": "Register for the campus drive",
    "fields": [
        {"label": "Full Name", "fieldType": "text", "required": True, "autoFillKey": "name"},
        {"label": "CGPA", "fieldType": "number", "autoFillKey": "cgpa"},
        {"label": "Preferred Role", "fieldType": "select",
         "options": [{"label": "SDE", "value": "sde"}, {"label": "Analyst", "value": "analyst"}]},
        {"label": "Resume", "fieldType": "file"},
    ],
    "published": True,
}


def _create_form(client, headers, body=None):
    response = client.post("/api/admin/forms", json=body or FORM_BODY, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["formId"]


def _field_ids(client, form_id, headers):
    form = client.get(f"/api/admin/forms/{form_id}", headers=headers).json()["form"]
    return [f["id"] for f in form["fields"]]


# ---------------------------------------------------------------------------
# Auth guards
# ---------------------------------------------------------------------------

def test_missing_token_is_unauthorized(client):
    assert client.get("/api/admin/forms").status_code == 401


def test_invalid_token_is_unauthorized(client):
    response = client.get("/api/admin/forms", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_student_cannot_use_admin_routes(client, student_headers):
    response = client.get("/api/admin/forms", headers=student_headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Admins only"}


def test_admin_cannot_submit(client, admin_headers):
    response = client.post("/api/forms/abc/responses", json={"responses": []}, headers=admin_headers)
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Admin template CRUD
# ---------------------------------------------------------------------------

def test_create_and_read_form(client, admin_headers):
    form_id = _create_form(client, admin_headers)

    response = client.get(f"/api/admin/forms/{form_id}", headers=admin_headers)

    assert response.status_code == 200
    form = response.json()["form"]
    assert form["name"] == "Placement Drive 2024"
    assert [f["fieldType"] for f in form["fields"]] == ["text", "number", "select", "file"]
    assert form["colorScheme"] == {"primaryColor": "#007bff", "backgroundColor": "#ffffff", "textColor": "#333333"}


def test_create_invalid_form_reports_every_problem(client, admin_headers):
    response = client.post("/api/admin/forms", json={
        "name": "",
        "fields": [
            {"label": "Branch", "fieldType": "select", "options": []},
            {"label": "Mentor", "fieldType": "text", "autoFillKey": "mentor"},
        ],
    }, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid form template"
    assert [d["path"] for d in body["details"]] == ["name", "fields.0.options", "fields.1.autoFillKey"]


def test_list_only_own_forms(client, admin_headers):
    _create_form(client, admin_headers)
    _create_form(client, auth_headers(OTHER_ADMIN_ID, "admin"))

    forms = client.get("/api/admin/forms", headers=admin_headers).json()["forms"]

    assert len(forms) == 1


def test_other_admin_cannot_read_form(client, admin_headers):
    form_id = _create_form(client, admin_headers)

    response = client.get(f"/api/admin/forms/{form_id}", headers=auth_headers(OTHER_ADMIN_ID, "admin"))

    assert response.status_code == 403


def test_unknown_form_is_not_found(client, admin_headers):
    assert client.get("/api/admin/forms/665f00000000000000000000", headers=admin_headers).status_code == 404


def test_update_replaces_field_list(client, admin_headers):
    form_id = _create_form(client, admin_headers)
    kept_id = _field_ids(client, form_id, admin_headers)[0]

    response = client.put(f"/api/admin/forms/{form_id}", json={
        "name": "Renamed",
        "fields": [
            {"id": kept_id, "label": "Name", "fieldType": "text", "required": True},
            {"label": "LinkedIn", "fieldType": "text"},
        ],
    }, headers=admin_headers)

    assert response.status_code == 200
    form = response.json()["form"]
    assert form["name"] == "Renamed"
    assert [f["label"] for f in form["fields"]] == ["Name", "LinkedIn"]
    assert form["fields"][0]["id"] == kept_id
    assert form["description"] == "Register for the campus drive"


def test_update_without_fields_keeps_them(client, admin_headers):
    form_id = _create_form(client, admin_headers)

    response = client.put(f"/api/admin/forms/{form_id}", json={"published": False}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["form"]["published"] is False
    assert len(response.json()["form"]["fields"]) == 4


def test_update_validates_merged_template(client, admin_headers):
    form_id = _create_form(client, admin_headers)

    response = client.put(f"/api/admin/forms/{form_id}", json={"fields": []}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"][0]["path"] == "fields"


def test_autofill_key_catalog(client, admin_headers):
    response = client.get("/api/admin/forms/autofill-keys", headers=admin_headers)

    assert response.status_code == 200
    assert {"value": "cgpa", "label": "CGPA"} in response.json()


def test_delete_retains_responses_by_default(client, admin_headers, student_headers, response_repo):
    form_id = _create_form(client, admin_headers, {
        "name": "Simple", "published": True, "fields": [{"label": "Note", "fieldType": "text"}],
    })
    field_id = _field_ids(client, form_id, admin_headers)[0]
    client.post(f"/api/forms/{form_id}/responses",
                json={"responses": [{"fieldId": field_id, "value": "hi"}]}, headers=student_headers)

    response = client.delete(f"/api/admin/forms/{form_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["responsesDeleted"] == 0
    assert len(response_repo.items) == 1
    assert client.get(f"/api/admin/forms/{form_id}", headers=admin_headers).status_code == 404


def test_delete_cascades_when_configured(client, services, admin_headers, student_headers, response_repo):
    services.settings.cascade_delete_responses = True
    form_id = _create_form(client, admin_headers, {
        "name": "Simple", "published": True, "fields": [{"label": "Note", "fieldType": "text"}],
    })
    field_id = _field_ids(client, form_id, admin_headers)[0]
    client.post(f"/api/forms/{form_id}/responses",
                json={"responses": [{"fieldId": field_id, "value": "hi"}]}, headers=student_headers)

    response = client.delete(f"/api/admin/forms/{form_id}", headers=admin_headers)

    assert response.json()["responsesDeleted"] == 1
    assert response_repo.items == []


# ---------------------------------------------------------------------------
# Respondent flow
# ---------------------------------------------------------------------------

def test_fetch_form_prefills_profile_values(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers)

    response = client.get(f"/api/forms/{form_id}", headers=student_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["hasSubmitted"] is False
    assert body["submissionId"] is None
    name, cgpa, role, resume = body["form"]["fields"]
    assert (name["value"], name["isReadOnly"]) == ("Asha Rao", True)
    assert (cgpa["value"], cgpa["isReadOnly"]) == (8.5, True)
    assert "value" not in role and "isReadOnly" not in role
    assert "adminId" not in body["form"]


def test_unpublished_form_is_hidden_from_students(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers, {**FORM_BODY, "published": False})

    response = client.get(f"/api/forms/{form_id}", headers=student_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Form not found or not published"}


def test_shared_form_hidden_from_other_students(client, admin_headers):
    form_id = _create_form(client, admin_headers, {**FORM_BODY, "sharedWith": [STUDENT_ID]})

    assert client.get(f"/api/forms/{form_id}", headers=auth_headers(OTHER_STUDENT_ID, "student")).status_code == 404
    assert client.get(f"/api/forms/{form_id}", headers=auth_headers(STUDENT_ID, "student")).status_code == 200


def test_client_schema_endpoint(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers)
    ids = _field_ids(client, form_id, admin_headers)

    schema = client.get(f"/api/forms/{form_id}/schema", headers=student_headers).json()

    assert list(schema["properties"]) == ids
    assert schema["required"] == [ids[0]]


def test_submission_rejected_with_details(client, admin_headers, student_headers, response_repo):
    form_id = _create_form(client, admin_headers)
    name_id, cgpa_id, role_id, resume_id = _field_ids(client, form_id, admin_headers)

    response = client.post(f"/api/forms/{form_id}/responses", json={"responses": [
        {"fieldId": name_id, "value": "Asha Rao"},
        {"fieldId": cgpa_id, "value": "9.9"},
        {"fieldId": resume_id, "value": "cv.pdf"},
    ]}, headers=student_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert [(d["fieldId"], d["code"]) for d in body["details"]] == [
        (cgpa_id, "autofill_mismatch"),
        (resume_id, "invalid_file_reference"),
    ]
    assert response_repo.items == []


def test_submit_then_view_submission(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers)
    name_id, cgpa_id, role_id, resume_id = _field_ids(client, form_id, admin_headers)

    response = client.post(f"/api/forms/{form_id}/responses", json={"responses": [
        {"fieldId": name_id, "fieldLabel": "Full Name", "value": "Asha Rao"},
        {"fieldId": cgpa_id, "value": 8.5},
        {"fieldId": role_id, "value": "sde"},
        {"fieldId": resume_id, "value": "https://files.example.com/form-uploads/cv.pdf"},
    ]}, headers=student_headers)

    assert response.status_code == 201, response.text
    response_id = response.json()["responseId"]

    fetched = client.get(f"/api/forms/{form_id}", headers=student_headers).json()
    assert fetched["hasSubmitted"] is True
    assert fetched["submissionId"] == response_id

    submission = client.get(f"/api/student/forms/{form_id}/submission", headers=student_headers).json()["submission"]
    assert submission["formName"] == "Placement Drive 2024"
    assert [(f["label"], f["value"]) for f in submission["fields"]] == [
        ("Full Name", "Asha Rao"),
        ("CGPA", 8.5),
        ("Preferred Role", "sde"),
        ("Resume", "https://files.example.com/form-uploads/cv.pdf"),
    ]


def test_single_submission_mode_returns_conflict(client, services, admin_headers, student_headers):
    services.settings.allow_multiple_submissions = False
    form_id = _create_form(client, admin_headers, {
        "name": "Simple", "published": True, "fields": [{"label": "Note", "fieldType": "text"}],
    })
    field_id = _field_ids(client, form_id, admin_headers)[0]
    body = {"responses": [{"fieldId": field_id, "value": "hi"}]}

    assert client.post(f"/api/forms/{form_id}/responses", json=body, headers=student_headers).status_code == 201
    assert client.post(f"/api/forms/{form_id}/responses", json=body, headers=student_headers).status_code == 409


def test_no_submission_is_not_found(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers)

    response = client.get(f"/api/student/forms/{form_id}/submission", headers=student_headers)

    assert response.status_code == 404


def test_student_form_list(client, admin_headers, student_headers, template_repo):
    form_id = _create_form(client, admin_headers)
    _create_form(client, admin_headers, {**FORM_BODY, "name": "Draft", "published": False})
    template_repo.insert(make_template(name="Private", shared_with=[OTHER_STUDENT_ID]))

    forms = client.get("/api/student/forms", headers=student_headers).json()["forms"]

    assert [(f["id"], f["hasSubmitted"]) for f in forms] == [(form_id, False)]


# ---------------------------------------------------------------------------
# Admin responses view and export
# ---------------------------------------------------------------------------

def _submit_simple(client, admin_headers, student_headers):
    form_id = _create_form(client, admin_headers, {
        "name": "Mock Interview Slots",
        "published": True,
        "fields": [
            {"label": "Slot", "fieldType": "text", "required": True},
            {"label": "Remarks", "fieldType": "text"},
        ],
    })
    slot_id, _ = _field_ids(client, form_id, admin_headers)
    client.post(f"/api/forms/{form_id}/responses",
                json={"responses": [{"fieldId": slot_id, "value": "Morning"}]}, headers=student_headers)
    return form_id


def test_admin_responses_view(client, admin_headers, student_headers):
    form_id = _submit_simple(client, admin_headers, student_headers)

    body = client.get(f"/api/admin/forms/{form_id}/responses", headers=admin_headers).json()

    assert body["formName"] == "Mock Interview Slots"
    item = body["responses"][0]
    assert item["studentName"] == "Asha Rao"
    assert [(a["fieldLabel"], a["displayValue"]) for a in item["responses"]] == [
        ("Slot", "Morning"),
        ("Remarks", "Not answered"),
    ]


def test_export_with_no_responses(client, admin_headers):
    form_id = _create_form(client, admin_headers)

    response = client.get(f"/api/admin/forms/{form_id}/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "No responses found for this form to export.", "success": False}


def test_export_returns_workbook(client, admin_headers, student_headers):
    form_id = _submit_simple(client, admin_headers, student_headers)

    response = client.get(f"/api/admin/forms/{form_id}/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert 'filename="mock_interview_slots_responses_' in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


# ---------------------------------------------------------------------------
# Uploads and health
# ---------------------------------------------------------------------------

def test_upload_returns_file_url(client, student_headers, storage):
    response = client.post(
        "/api/upload",
        files={"file": ("my cv.pdf", b"%PDF-1.4 test", "application/pdf")},
        headers=student_headers,
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["originalFilename"] == "my cv.pdf"
    assert body["fileUrl"].startswith("https://files.example.com/form-uploads/form_uploads/")
    assert body["fileUrl"].endswith("-my_cv.pdf")
    assert len(storage.uploads) == 1


def test_upload_rejects_unsupported_type(client, student_headers, storage):
    response = client.post(
        "/api/upload",
        files={"file": ("run.exe", b"MZ", "application/octet-stream")},
        headers=student_headers,
    )

    assert response.status_code == 400
    assert storage.uploads == {}


def test_upload_rejects_oversized_file(client, services, student_headers):
    services.settings.max_upload_size_mb = 0

    response = client.post(
        "/api/upload",
        files={"file": ("cv.pdf", b"%PDF", "application/pdf")},
        headers=student_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("File too large")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.allow_multiple_submissions is True
    assert settings.cascade_delete_responses is False
