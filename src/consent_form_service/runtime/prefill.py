from __future__ import annotations

from typing import Any, Dict, Mapping, Set, Union

from ..answers import coerce_answer, is_blank, selected_options
from ..schemas import ClientProfile, ConsentForm
from .rules import MedicalHistoryRule

# Profile attribute -> answer name used by the standard "Your Details" section.
PROFILE_ANSWER_NAMES: Dict[str, str] = {
    "name": "clientName",
    "email": "clientEmail",
    "phone": "Phone",
    "date_of_birth": "DOB",
    "address": "FullAddress",
}


def as_profile(profile: Union[ClientProfile, Mapping[str, Any]]) -> ClientProfile:
    if isinstance(profile, ClientProfile):
        return profile
    return ClientProfile.model_validate(dict(profile))


def build_prefill(
    form: ConsentForm,
    profile: Union[ClientProfile, Mapping[str, Any]],
    rule: MedicalHistoryRule,
    *,
    current: Mapping[str, Any],
    edited: Set[str],
) -> Dict[str, Any]:
    """
    Answers to seed from a known respondent profile.

    Only names present on the form are seeded, and nothing the respondent
    already edited is touched. The medical fields move together: if any of
    them was edited, none is seeded.
    """
    p = as_profile(profile)
    updates: Dict[str, Any] = {}

    for attr, name in PROFILE_ANSWER_NAMES.items():
        value = getattr(p, attr, None)
        field = form.field_by_name(name)
        if field is None or name in edited or is_blank(value):
            continue
        updates[name] = coerce_answer(field, str(value).strip())

    if edited & rule.field_names:
        return updates

    no_issues_field = form.field_by_name(rule.no_issues_field)
    conditions = (p.medical_conditions or "").strip()
    if conditions:
        if form.field_by_name(rule.details_field) is not None:
            updates[rule.details_field] = conditions
        if no_issues_field is not None:
            updates[rule.no_issues_field] = False

    allergies = (p.allergies or "").strip()
    if allergies and form.field_by_name(rule.issues_field) is not None:
        existing = selected_options(current.get(rule.issues_field))
        updates[rule.issues_field] = existing | {rule.allergies_option}
        if no_issues_field is not None:
            updates[rule.no_issues_field] = False

    return updates
