from consent_form_service.runtime.rules import (
    MedicalHistoryRule,
    cross_field_updates,
    required_field_error,
    validate_step,
)
from consent_form_service.schemas import ConsentForm, FormField, FormSection

RULE = MedicalHistoryRule()

MEDICAL = FormSection(
    id="medical",
    title="Medical History",
    fields=[
        FormField(id="m1", name="noIssues", type="checkbox"),
        FormField(id="m2", name="medicalIssues", type="checkbox", options=["Diabetes", "Any allergies"]),
        FormField(id="m3", name="medicalDetails", type="textarea"),
    ],
)
FORM = ConsentForm(title="T", sections=[MEDICAL])


def _check(section, answers, artist=None):
    return validate_step(section, answers, selected_artist_id=artist, rule=RULE)


def test_required_messages_per_type():
    flag = FormField(id="1", name="ageConfirm", type="checkbox", label="Age", required=True)
    radio = FormField(id="2", name="media", type="radio", label="Media", options=["Yes", "No"], required=True)
    text = FormField(id="3", name="clientName", label="Name", required=True)
    assert required_field_error(flag, False) == "Age must be checked"
    assert required_field_error(flag, True) is None
    assert required_field_error(radio, "") == "Please select an option for Media"
    assert required_field_error(text, "   ") == "Name is required"
    assert required_field_error(text, "Jane") is None


def test_required_fields_collected_together():
    section = FormSection(
        id="s",
        title="Details",
        fields=[
            FormField(id="1", name="clientName", label="Name", required=True),
            FormField(id="2", name="Phone", label="Phone", required=True),
            FormField(id="3", name="nickname", label="Nickname"),
        ],
    )
    assert _check(section, {}) == {"clientName": "Name is required", "Phone": "Phone is required"}


def test_artist_step_needs_selection():
    section = FormSection(id="a", title="Your Artist", kind="artist_selection")
    assert _check(section, {}) == {"artist": "Please select an artist"}
    assert _check(section, {}, artist="7") == {}


def test_medical_needs_issue_or_no_issues():
    errors = _check(MEDICAL, {})
    assert "medicalIssues" in errors
    assert _check(MEDICAL, {"noIssues": True}) == {}


def test_medical_details_needed_when_issues_selected():
    errors = _check(MEDICAL, {"medicalIssues": frozenset({"Diabetes"})})
    assert errors == {"medicalDetails": "Please provide details for the selected medical conditions"}
    assert _check(MEDICAL, {"medicalIssues": frozenset({"Diabetes"}), "medicalDetails": "Type 1"}) == {}


def test_untouched_optional_section_passes():
    section = FormSection(
        id="o",
        title="Extras",
        required=False,
        fields=[FormField(id="1", name="tattooIdea", label="Idea", required=True)],
    )
    assert _check(section, {}) == {}
    assert _check(section, {"tattooIdea": "  "}) == {}


def test_started_optional_section_is_checked():
    section = FormSection(
        id="o",
        title="Extras",
        required=False,
        fields=[
            FormField(id="1", name="tattooIdea", label="Idea", required=True),
            FormField(id="2", name="placement", label="Placement", required=True),
        ],
    )
    assert _check(section, {"tattooIdea": "rose"}) == {"placement": "Placement is required"}


def test_cross_field_updates():
    assert cross_field_updates(FORM, RULE, "medicalIssues", frozenset({"Diabetes"})) == {"noIssues": False}
    assert cross_field_updates(FORM, RULE, "noIssues", True) == {"medicalIssues": frozenset(), "medicalDetails": ""}
    assert cross_field_updates(FORM, RULE, "noIssues", False) == {}
    assert cross_field_updates(FORM, RULE, "medicalIssues", frozenset()) == {}


def test_cross_field_updates_need_both_fields_on_form():
    form = ConsentForm(title="T", sections=[FormSection(id="s", title="S", fields=[MEDICAL.fields[0]])])
    assert cross_field_updates(form, RULE, "noIssues", True) == {}


def test_rule_from_custom_names():
    rule = MedicalHistoryRule(no_issues_field="clear", issues_field="conditions", details_field="notes")
    section = FormSection(
        id="m",
        title="Health",
        fields=[
            FormField(id="1", name="clear", type="checkbox"),
            FormField(id="2", name="conditions", type="checkbox", options=["Asthma"]),
        ],
    )
    errors = validate_step(section, {}, selected_artist_id=None, rule=rule)
    assert list(errors) == ["conditions"]


def test_optional_artist_step_still_needs_selection():
    section = FormSection(id="a", title="Your Artist", kind="artist_selection", required=False)
    assert _check(section, {}) == {"artist": "Please select an artist"}


def test_optional_medical_section_still_applies_medical_rule():
    section = MEDICAL.model_copy(update={"required": False})
    assert list(_check(section, {})) == ["medicalIssues"]
    assert _check(section, {"noIssues": True}) == {}
