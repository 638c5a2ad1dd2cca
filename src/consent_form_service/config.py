from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _env_str(name: str, default: str) -> str:
    v = (os.getenv(name) or "").strip()
    return v or default


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    procedure_type: str = "tattoo"
    no_issues_field: str = "noIssues"
    issues_field: str = "medicalIssues"
    details_field: str = "medicalDetails"
    allergies_option: str = "Any allergies"
    respondent_email_field: str = "clientEmail"
    notify_on_submit: bool = True
    date_display_format: str = "%d/%m/%Y"
    field_name_hex_length: int = 8


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """
    Read engine settings from the environment.

    `.env` (or `dotenv_path`) is loaded first without overriding variables that
    are already set. Env vars:

    - `CONSENT_FORM_PROCEDURE_TYPE` tags submissions (tattoo | piercing | ...)
    - `CONSENT_FORM_NO_ISSUES_FIELD`, `CONSENT_FORM_ISSUES_FIELD`,
      `CONSENT_FORM_DETAILS_FIELD` name the medical-history fields
    - `CONSENT_FORM_ALLERGIES_OPTION` is the issue option seeded from a profile's allergies
    - `CONSENT_FORM_RESPONDENT_EMAIL_FIELD` is the answer used as the document recipient
    - `CONSENT_FORM_NOTIFY_ON_SUBMIT=0` disables post-submit delivery
    - `CONSENT_FORM_DATE_DISPLAY_FORMAT` is the strftime format used by the viewer
    """
    load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)

    defaults = Settings()
    return Settings(
        procedure_type=_env_str("CONSENT_FORM_PROCEDURE_TYPE", defaults.procedure_type),
        no_issues_field=_env_str("CONSENT_FORM_NO_ISSUES_FIELD", defaults.no_issues_field),
        issues_field=_env_str("CONSENT_FORM_ISSUES_FIELD", defaults.issues_field),
        details_field=_env_str("CONSENT_FORM_DETAILS_FIELD", defaults.details_field),
        allergies_option=_env_str("CONSENT_FORM_ALLERGIES_OPTION", defaults.allergies_option),
        respondent_email_field=_env_str("CONSENT_FORM_RESPONDENT_EMAIL_FIELD", defaults.respondent_email_field),
        notify_on_submit=_env_bool("CONSENT_FORM_NOTIFY_ON_SUBMIT", default=defaults.notify_on_submit),
        date_display_format=_env_str("CONSENT_FORM_DATE_DISPLAY_FORMAT", defaults.date_display_format),
        field_name_hex_length=max(4, _env_int("CONSENT_FORM_FIELD_NAME_HEX_LENGTH", defaults.field_name_hex_length)),
    )
