"""
Default consent template for new event forms.

Kept in the stored-row shape (`field_name`, `is_required`, ...) the events
backend uses, and validated into a fresh `ConsentForm` on every call.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from .schemas import ConsentForm

MEDICAL_CONDITIONS: List[str] = [
    "Diabetes",
    "Epilepsy",
    "Haemophilia",
    "Pregnant or breast feeding",
    "Taking blood thinning medication",
    "Skin condition",
    "Heart condition",
    "Recipient of an organ or bone marrow transplant",
    "Any blood-borne pathogens",
    "Any transmittable diseases",
    "Any allergies",
    "Had any adverse reaction to a previous tattoo or products used",
    "Fainted or other issues during a previous tattoo",
    "Issues with tattoo healing",
    "Other",
]

_YES_NO = ["Yes", "No"]


def _checkbox(fid: str, name: str, label: str, order: int, required: bool = True) -> Dict[str, Any]:
    return {
        "id": fid,
        "field_name": name,
        "field_type": "checkbox",
        "field_label": label,
        "is_required": required,
        "display_order": order,
    }


_DETAILS_SECTION: Dict[str, Any] = {
    "id": "details",
    "title": "Your Details",
    "description": "Please provide your personal information",
    "is_required": True,
    "fields": [
        {"id": "details-1", "field_name": "clientName", "field_type": "text", "field_label": "Name",
         "field_placeholder": "Your full name", "is_required": True, "display_order": 0},
        {"id": "details-2", "field_name": "DOB", "field_type": "date", "field_label": "Date of Birth",
         "is_required": True, "display_order": 1},
        {"id": "details-3", "field_name": "Phone", "field_type": "text", "field_label": "Phone",
         "field_placeholder": "Your contact number", "is_required": True, "display_order": 2},
        {"id": "details-4", "field_name": "clientEmail", "field_type": "text", "field_label": "Email",
         "field_placeholder": "Your email address", "is_required": True, "display_order": 3},
        {"id": "details-5", "field_name": "FullAddress", "field_type": "textarea", "field_label": "Address",
         "field_placeholder": "Your full address", "is_required": True, "display_order": 4},
    ],
}

_ARTIST_SECTION: Dict[str, Any] = {
    "id": "artist",
    "title": "Your Artist",
    "description": "Select the artist for your procedure",
    "is_required": True,
    "kind": "artist_selection",
    "fields": [],
}

_CONSENT_SECTION: Dict[str, Any] = {
    "id": "consent",
    "title": "Age & Consent",
    "description": "Please confirm the following",
    "is_required": True,
    "fields": [
        _checkbox(
            "consent-1",
            "ageConfirm",
            "I confirm that I am aged 18 or over and may be asked to produce valid identification "
            "(UK Driving Licence or Passport) proving this at my appointment and failure to provide "
            "the I.D will result in refusal of service and a charge.",
            0,
        ),
        _checkbox(
            "consent-2",
            "riskConfirm",
            "I fully understand that there are risks with tattooing, known and unknown, can lead to injury, "
            "including but not limited to infection, scarring, difficulties in detecting melanoma and allergic "
            "reactions to tattoo pigment, latex gloves, and/or soap. Being aware of the potential risks, I still "
            "wish to proceed with the tattoo application and I freely accept and expressly assume any and all risks.",
            1,
        ),
        _checkbox(
            "consent-3",
            "liabilityConfirm",
            "I understand neither the Artist, Venue nor Event Organiser is responsible for the meaning or spelling "
            "of the symbol or text that I have provided to them or chosen from the flash (design) sheets. "
            "Variations in colour/design may exist between the art I have selected and the actual tattoo. "
            "A tattoo is a permanent change to my appearance and can only be removed by laser or surgical means.",
            2,
        ),
        {"id": "consent-4", "field_name": "mediaRelease", "field_type": "radio",
         "field_label": "I release all rights to any photographs and video taken of me and the tattoo and give "
                        "consent in advance to their reproduction in print or electronic form.",
         "field_options": _YES_NO, "is_required": True, "display_order": 3},
        {"id": "consent-5", "field_name": "idPhoto", "field_type": "image",
         "field_label": "Upload photo ID (optional)", "is_required": False, "display_order": 4},
    ],
}

_MEDICAL_SECTION: Dict[str, Any] = {
    "id": "medical",
    "title": "Medical History",
    "description": "Please provide your medical information",
    "is_required": True,
    "fields": [
        _checkbox("medical-1", "noIssues", "No previous tattoo issues or relevant medical issues", 0, required=False),
        {"id": "medical-2", "field_name": "medicalIssues", "field_type": "checkbox",
         "field_label": "Medical conditions (select all that apply)", "field_options": MEDICAL_CONDITIONS,
         "is_required": False, "display_order": 1},
        {"id": "medical-3", "field_name": "medicalDetails", "field_type": "textarea", "field_label": "Medical Details",
         "field_placeholder": "Please provide details of any medical conditions selected above",
         "is_required": False, "display_order": 2},
    ],
}

_ON_THE_DAY_SECTION: Dict[str, Any] = {
    "id": "on-the-day",
    "title": "On The Day",
    "description": "Please confirm the following for the day of your procedure",
    "is_required": True,
    "fields": [
        _checkbox(
            "day-1",
            "aftercareAdvice",
            "I understand that I will be given aftercare advice in verbal form and by email. I waive any "
            "liability of the venue, event organiser and the artist for any healing issues.",
            0,
        ),
        _checkbox(
            "day-2",
            "eatBefore",
            "I confirm that I have eaten within the 2 hours of the appointment to increase my blood sugar levels.",
            1,
        ),
        _checkbox(
            "day-3",
            "unwell",
            "I understand that if I am unwell or unfit at the time of my appointment that I will inform my artist "
            "and my appointment may be cancelled.",
            2,
        ),
        _checkbox("day-4", "noAlcohol", "I will not get tattooed under the influence of alcohol or drugs.", 3),
        {"id": "day-5", "field_name": "marketingConsent", "field_type": "radio",
         "field_label": "I agree for my name and email address to be used by the Event Organiser to inform me of "
                        "other similar events and partner offers.",
         "field_options": _YES_NO, "is_required": True, "display_order": 4},
    ],
}


def default_consent_form(*, event_id: Optional[str] = None, include_artist_step: bool = True) -> ConsentForm:
    sections = [_DETAILS_SECTION]
    if include_artist_step:
        sections.append(_ARTIST_SECTION)
    sections.extend([_CONSENT_SECTION, _MEDICAL_SECTION, _ON_THE_DAY_SECTION])

    rows = []
    for order, section in enumerate(sections):
        row = copy.deepcopy(section)
        row["display_order"] = order
        rows.append(row)

    return ConsentForm.model_validate(
        {
            "event_id": event_id,
            "title": "Medical History & Consent Form",
            "description": "Please complete this form before your procedure",
            "requires_medical_history": True,
            "sections": rows,
        }
    )
