"""Exception types raised by the consent-form engine."""

from __future__ import annotations

from typing import Optional


class ConsentFormError(Exception):
    pass


class BuilderError(ConsentFormError, LookupError):
    pass


class UnknownSectionError(BuilderError):
    def __init__(self, section_id: str) -> None:
        super().__init__(f"Unknown section id: {section_id}")
        self.section_id = section_id


class UnknownFieldError(BuilderError):
    def __init__(self, section_id: str, field_id: str) -> None:
        super().__init__(f"Unknown field id {field_id} in section {section_id}")
        self.section_id = section_id
        self.field_id = field_id


class AnswerTypeError(ConsentFormError, ValueError):
    pass


class WizardStateError(ConsentFormError):
    """An event was sent to the wizard in a state that does not accept it."""


class CollaboratorError(ConsentFormError):
    """
    An external call (store, artist directory, documents) failed.

    Engine state is left untouched when this is raised, so the caller may retry.
    """

    def __init__(self, operation: str, message: str, *, retryable: bool = True, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.retryable = retryable
        self.cause = cause
