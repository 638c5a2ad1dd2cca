"""
Dynamic consent-form engine.

- Schema models: `consent_form_service.schemas`
- Authoring: `consent_form_service.builder`
- Respondent wizard: `consent_form_service.runtime`
- Read-only rendering: `consent_form_service.viewer`

Storage, artist lookup and document delivery are collaborators supplied by
the caller (see `consent_form_service.collaborators`).
"""

from .errors import (  # noqa: F401
    AnswerTypeError,
    BuilderError,
    CollaboratorError,
    ConsentFormError,
    UnknownFieldError,
    UnknownSectionError,
    WizardStateError,
)
from .schemas import (  # noqa: F401
    Artist,
    ClientProfile,
    ConsentForm,
    FormField,
    FormSection,
    Submission,
)
from .validation import SchemaError, validate_form  # noqa: F401
