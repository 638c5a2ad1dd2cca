from consent_form_service.runtime import Wizard
from consent_form_service.runtime.prefill import build_prefill
from consent_form_service.runtime.rules import MedicalHistoryRule
from consent_form_service.schemas import ClientProfile, ConsentForm, FormField, FormSection
from consent_form_service.templates import default_consent_form

PROFILE = {
    "id": 31,
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "07700 900000",
    "dateOfBirth": "1990-02-01",
    "address": "1 High Street",
    "medicalConditions": "Asthma",
    "allergies": "Latex",
}


def test_profile_seeds_details_and_medical_answers():
    w = Wizard(default_consent_form(), profile=PROFILE)
    a = w.answers
    assert a["clientName"] == "Jane Doe"
    assert a["clientEmail"] == "jane@example.com"
    assert a["DOB"] == "1990-02-01"
    assert a["FullAddress"] == "1 High Street"
    assert a["medicalDetails"] == "Asthma"
    assert a["medicalIssues"] == frozenset({"Any allergies"})
    assert a["noIssues"] is False
    assert w.respondent_id == "31"


def test_prefill_never_overwrites_edited_answers():
    w = Wizard(default_consent_form())
    w.set_answer("clientName", "J. Doe")
    w.set_answer("noIssues", True)
    w.apply_prefill(PROFILE)
    a = w.answers
    assert a["clientName"] == "J. Doe"
    assert a["Phone"] == "07700 900000"
    assert a["noIssues"] is True
    assert a["medicalIssues"] == frozenset()
    assert "Asthma" not in a.values()


def test_allergies_are_added_to_existing_issues():
    form = default_consent_form()
    updates = build_prefill(
        form,
        ClientProfile(allergies="Nuts"),
        MedicalHistoryRule(),
        current={"medicalIssues": frozenset({"Diabetes"})},
        edited=set(),
    )
    assert updates == {"medicalIssues": frozenset({"Diabetes", "Any allergies"}), "noIssues": False}


def test_blank_profile_values_and_missing_fields_are_skipped():
    form = default_consent_form()
    updates = build_prefill(
        form,
        {"name": "  ", "email": "jane@example.com", "medical_conditions": ""},
        MedicalHistoryRule(),
        current={},
        edited=set(),
    )
    assert updates == {"clientEmail": "jane@example.com"}


def _form_without_details():
    return ConsentForm(
        title="Medical",
        sections=[
            FormSection(
                id="m",
                title="Medical History",
                fields=[
                    FormField(id="1", name="noIssues", type="checkbox"),
                    FormField(id="2", name="medicalIssues", type="checkbox", options=["Diabetes", "Any allergies"]),
                ],
            )
        ],
    )


def test_medical_conditions_clear_no_issues_without_details_field():
    updates = build_prefill(
        _form_without_details(),
        {"medical_conditions": "asthma"},
        MedicalHistoryRule(),
        current={"noIssues": True},
        edited=set(),
    )
    assert updates == {"noIssues": False}


def test_wizard_prefill_clears_no_issues_without_details_field():
    w = Wizard(_form_without_details(), profile={"medical_conditions": "asthma"})
    assert w.answers == {"noIssues": False}
