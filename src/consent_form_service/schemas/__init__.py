"""
Schema package for consent-form data models.
"""

from .consent_form import (  # noqa: F401
    CHOICE_TYPES,
    FIELD_TYPES,
    LEGACY_ARTIST_SECTION_TITLE,
    PLACEHOLDER_TYPES,
    Artist,
    ClientProfile,
    ConsentForm,
    FieldType,
    FormField,
    FormSection,
    SectionKind,
)
from .submission import Submission  # noqa: F401
