"""
Step validation and cross-field answer rules.

The medical-history mechanism is driven by three configurable field names
(no-issues flag, issue set, free-text details); the condition vocabulary
itself is ordinary field `options` data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..answers import answer_kind, is_blank, selected_options
from ..config import Settings, load_settings
from ..schemas import ConsentForm, FormField, FormSection

ARTIST_ERROR_KEY = "artist"


@dataclass(frozen=True)
class MedicalHistoryRule:
    no_issues_field: str = "noIssues"
    issues_field: str = "medicalIssues"
    details_field: str = "medicalDetails"
    allergies_option: str = "Any allergies"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MedicalHistoryRule":
        s = settings or load_settings()
        return cls(
            no_issues_field=s.no_issues_field,
            issues_field=s.issues_field,
            details_field=s.details_field,
            allergies_option=s.allergies_option,
        )

    @property
    def field_names(self) -> set[str]:
        return {self.no_issues_field, self.issues_field, self.details_field}

    def applies_to_section(self, section: FormSection) -> bool:
        names = set(section.field_names())
        return self.issues_field in names and self.no_issues_field in names

    def applies_to_form(self, form: ConsentForm) -> bool:
        return form.field_by_name(self.issues_field) is not None and form.field_by_name(self.no_issues_field) is not None


def cross_field_updates(form: ConsentForm, rule: MedicalHistoryRule, name: str, value: Any) -> Dict[str, Any]:
    """
    Extra writes implied by setting `name` to `value` (already coerced).

    "No issues" and a non-empty issue set are mutually exclusive: selecting any
    issue clears the flag; setting the flag clears the issues and the details.
    """
    if not rule.applies_to_form(form):
        return {}
    if name == rule.issues_field and selected_options(value):
        return {rule.no_issues_field: False}
    if name == rule.no_issues_field and value is True:
        updates: Dict[str, Any] = {rule.issues_field: frozenset()}
        if form.field_by_name(rule.details_field) is not None:
            updates[rule.details_field] = ""
        return updates
    return {}


def required_field_error(field: FormField, value: Any) -> Optional[str]:
    label = field.label or field.name
    kind = answer_kind(field)
    if kind == "flag":
        # A required bare checkbox is an affirmation: only True satisfies it.
        return None if value is True else f"{label} must be checked"
    if kind == "choices":
        return None if selected_options(value) else f"{label} is required"
    if field.type == "radio":
        return None if not is_blank(value) else f"Please select an option for {label}"
    return None if not is_blank(value) else f"{label} is required"


def _section_untouched(section: FormSection, answers: Mapping[str, Any]) -> bool:
    for f in section.fields:
        v = answers.get(f.name)
        if answer_kind(f) == "choices":
            if selected_options(v):
                return False
        elif v is True or (not isinstance(v, bool) and not is_blank(v)):
            return False
    return True


def validate_step(
    section: FormSection,
    answers: Mapping[str, Any],
    *,
    selected_artist_id: Optional[str],
    rule: MedicalHistoryRule,
) -> Dict[str, str]:
    """
    Collect every problem blocking `section`, keyed by field name (or `artist`).

    The artist step and the medical-history rule are always enforced. In an
    optional section (`required=False`) the respondent has not touched, the
    per-field required checks are skipped; once started it is checked like
    any other.
    """
    errors: Dict[str, str] = {}
    if section.is_artist_step:
        if not selected_artist_id:
            errors[ARTIST_ERROR_KEY] = "Please select an artist"
        return errors

    check_required = section.required or not _section_untouched(section, answers)
    for f in section.fields:
        if not (check_required and f.required):
            continue
        msg = required_field_error(f, answers.get(f.name))
        if msg:
            errors[f.name] = msg

    if rule.applies_to_section(section):
        no_issues = answers.get(rule.no_issues_field) is True
        issues = selected_options(answers.get(rule.issues_field))
        if not no_issues and not issues:
            errors.setdefault(
                rule.issues_field,
                'Please select at least one medical condition or check "No previous issues"',
            )
        if issues and rule.details_field in section.field_names() and is_blank(answers.get(rule.details_field)):
            errors.setdefault(rule.details_field, "Please provide details for the selected medical conditions")

    return errors
