from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from .consent_form import Artist, _coerce_id


class Submission(BaseModel):
    """
    One respondent's completed answers against a form.

    Created once by the wizard on a validated final step; frozen afterwards.
    `answers` maps field names to str | bool | frozenset[str] depending on the
    field type (see `consent_form_service.answers`).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    form_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("form_id", "formId"))
    event_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("event_id", "eventId"))
    respondent_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("respondent_id", "respondentId", "client_id"),
    )
    selected_artist_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("selected_artist_id", "selectedArtistId", "artist_id"),
    )
    artist: Optional[Artist] = None
    procedure_type: str = Field(default="tattoo", validation_alias=AliasChoices("procedure_type", "procedureType"))
    answers: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("answers", "submission_data", "submissionData"),
    )
    submitted_at: datetime = Field(..., validation_alias=AliasChoices("submitted_at", "submittedAt"))

    @field_validator("id", "form_id", "event_id", "respondent_id", "selected_artist_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_serializer("answers")
    def _serialize_answers(self, answers: Dict[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for k, v in answers.items():
            if isinstance(v, (set, frozenset)):
                out[k] = sorted(str(x) for x in v)
            else:
                out[k] = v
        return out
