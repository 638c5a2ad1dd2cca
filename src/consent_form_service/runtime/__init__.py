"""
Respondent-facing runtime: the step wizard and the rules it applies.
"""

from .artists import filter_artists, find_artist, load_artists  # noqa: F401
from .prefill import PROFILE_ANSWER_NAMES, build_prefill  # noqa: F401
from .rules import MedicalHistoryRule, cross_field_updates, validate_step  # noqa: F401
from .wizard import StepResult, Wizard, WizardStatus  # noqa: F401
