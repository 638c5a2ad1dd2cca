from consent_form_service.schemas import ConsentForm
from consent_form_service.validation import validate_form


def _form(**overrides):
    data = {
        "title": "Consent",
        "sections": [
            {
                "id": "s1",
                "title": "Details",
                "fields": [
                    {"id": "f1", "name": "clientName", "type": "text", "required": True},
                    {"id": "f2", "name": "mediaRelease", "type": "radio", "options": ["Yes", "No"]},
                ],
            }
        ],
    }
    data.update(overrides)
    return ConsentForm.model_validate(data)


def _codes(form):
    return [e.code for e in validate_form(form)]


def test_valid_form_has_no_errors():
    assert validate_form(_form()) == []


def test_empty_title_and_no_sections():
    codes = _codes(_form(title="  ", sections=[]))
    assert "empty_title" in codes
    assert "no_sections" in codes


def test_duplicate_field_names_across_sections():
    form = _form(
        sections=[
            {"id": "s1", "title": "One", "fields": [{"id": "f1", "name": "clientName"}]},
            {"id": "s2", "title": "Two", "fields": [{"id": "f1", "name": "clientName"}]},
        ]
    )
    errors = validate_form(form)
    dup = [e for e in errors if e.code == "duplicate_field_name"]
    assert len(dup) == 1
    assert dup[0].section_id == "s2"
    assert dup[0].field_name == "clientName"


def test_choice_fields_need_options():
    form = _form(
        sections=[
            {
                "id": "s1",
                "title": "One",
                "fields": [
                    {"id": "f1", "name": "a", "type": "radio"},
                    {"id": "f2", "name": "b", "type": "select", "options": []},
                    {"id": "f3", "name": "c", "type": "checkbox"},
                ],
            }
        ]
    )
    errors = [e for e in validate_form(form) if e.code == "missing_options"]
    assert {e.field_name for e in errors} == {"a", "b"}


def test_structural_extras():
    form = _form(
        sections=[
            {"id": "s1", "title": "Your Artist", "kind": "artist_selection", "fields": [{"id": "f1", "name": "x"}]},
            {"id": "s1", "title": "Again", "kind": "artist_selection"},
            {"id": "s3", "title": "Dupes", "fields": [{"id": "f1", "name": " "}, {"id": "f1", "name": "y"}]},
        ]
    )
    codes = set(_codes(form))
    assert {
        "artist_step_fields",
        "duplicate_section_id",
        "multiple_artist_steps",
        "blank_field_name",
        "duplicate_field_id",
    } <= codes


def test_errors_are_serializable():
    errors = validate_form(_form(title=""))
    assert errors[0].to_dict() == {"code": "empty_title", "message": "Form title is required"}
