from consent_form_service.templates import MEDICAL_CONDITIONS, default_consent_form
from consent_form_service.validation import validate_form


def test_default_template_is_valid_and_ordered():
    form = default_consent_form(event_id="ev-1")
    assert validate_form(form) == []
    assert [s.id for s in form.sections] == ["details", "artist", "consent", "medical", "on-the-day"]
    assert [s.order for s in form.sections] == [0, 1, 2, 3, 4]
    assert form.requires_medical_history
    assert form.sections[1].is_artist_step


def test_template_field_shapes():
    form = default_consent_form()
    assert form.field_by_name("ageConfirm").is_flag
    issues = form.field_by_name("medicalIssues")
    assert issues.is_choice_group
    assert issues.options == MEDICAL_CONDITIONS
    assert form.field_by_name("idPhoto").required is False


def test_without_artist_step():
    form = default_consent_form(include_artist_step=False)
    assert not form.has_artist_step
    assert [s.order for s in form.sections] == [0, 1, 2, 3]


def test_each_call_returns_a_fresh_form():
    a = default_consent_form()
    b = default_consent_form()
    a.sections[0].fields[0].label = "Changed"
    assert b.sections[0].fields[0].label == "Name"
