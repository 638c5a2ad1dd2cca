"""
Read-only rendering of a stored submission against its form.

The form may have changed since the submission was made. Fields with no
answer render as "Not provided", answers whose field no longer exists are
listed in `unmapped_answers`, and a missing or mismatched form is reported in
`problems`. Nothing here raises for drifted data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field

from .answers import answer_kind, is_blank
from .collaborators import DocumentService, FormStore, call_collaborator
from .config import Settings, load_settings
from .errors import CollaboratorError, ConsentFormError
from .runtime.prefill import PROFILE_ANSWER_NAMES
from .schemas import Artist, ConsentForm, FormField, Submission

logger = logging.getLogger("consent_forms.viewer")

NOT_PROVIDED = "Not provided"
NONE_SELECTED = "None selected"
CONFIRMED = "Confirmed"
NOT_CONFIRMED = "Not confirmed"
NO_FILE = "No file uploaded"
NO_DATE = "No date provided"


class FieldView(BaseModel):
    name: str
    label: str
    type: str
    provided: bool
    display: str = ""
    items: List[str] = Field(default_factory=list)


class SectionView(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    kind: str = "fields"
    fields: List[FieldView] = Field(default_factory=list)
    artist: Optional[Artist] = None


class SubmissionView(BaseModel):
    submission_id: Optional[str] = None
    form_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    procedure_type: str = ""
    submitted_at: datetime
    client: Dict[str, str] = Field(default_factory=dict)
    artist: Optional[Artist] = None
    sections: List[SectionView] = Field(default_factory=list)
    unmapped_answers: Dict[str, str] = Field(default_factory=dict)
    problems: List[str] = Field(default_factory=list)


def format_date(value: Any, fmt: str) -> str:
    if isinstance(value, datetime):
        return value.strftime(fmt)
    if isinstance(value, date):
        return value.strftime(fmt)
    t = str(value).strip()
    try:
        return date.fromisoformat(t).strftime(fmt)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(t).strftime(fmt)
    except ValueError:
        return t


def _display_any(value: Any) -> str:
    if isinstance(value, bool):
        return CONFIRMED if value else NOT_CONFIRMED
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(str(v) for v in value)
        return ", ".join(items) if items else NONE_SELECTED
    return str(value)


def render_field(field: FormField, value: Any, settings: Settings) -> FieldView:
    base = {"name": field.name, "label": field.label or field.name, "type": field.type}
    if value is None:
        return FieldView(**base, provided=False, display=NOT_PROVIDED)

    kind = answer_kind(field)
    if kind == "flag":
        if isinstance(value, bool):
            return FieldView(**base, provided=True, display=CONFIRMED if value else NOT_CONFIRMED)
        return FieldView(**base, provided=True, display=_display_any(value))

    if kind == "choices":
        if isinstance(value, str):
            value = [value] if value.strip() else []
        if not isinstance(value, (list, tuple, set, frozenset)):
            return FieldView(**base, provided=True, display=_display_any(value))
        chosen = {str(v) for v in value}
        # Schema order first, then anything the current options no longer list.
        items = [o for o in field.options if o in chosen]
        items += sorted(chosen - set(field.options))
        if not items:
            return FieldView(**base, provided=True, display=NONE_SELECTED)
        return FieldView(**base, provided=True, display=", ".join(items), items=items)

    if field.type in {"file", "image"}:
        if is_blank(value):
            return FieldView(**base, provided=True, display=NO_FILE)
        return FieldView(**base, provided=True, display=str(value))

    if field.type == "date":
        if is_blank(value):
            return FieldView(**base, provided=True, display=NO_DATE)
        return FieldView(**base, provided=True, display=format_date(value, settings.date_display_format))

    return FieldView(**base, provided=True, display=_display_any(value))


def _client_summary(answers: Dict[str, Any], settings: Settings) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for attr, name in PROFILE_ANSWER_NAMES.items():
        v = answers.get(name)
        if v is None or (isinstance(v, str) and is_blank(v)):
            continue
        out[attr] = format_date(v, settings.date_display_format) if attr == "date_of_birth" else str(v)
    return out


def render_submission(
    submission: Submission,
    form: Optional[ConsentForm],
    *,
    settings: Optional[Settings] = None,
) -> SubmissionView:
    s = settings or load_settings()
    answers = dict(submission.answers)
    view = SubmissionView(
        submission_id=submission.id,
        form_id=submission.form_id,
        procedure_type=submission.procedure_type,
        submitted_at=submission.submitted_at,
        client=_client_summary(answers, s),
        artist=submission.artist,
    )

    if form is None:
        view.problems.append(f"Form {submission.form_id or '<unknown>'} is not available")
    elif submission.form_id and form.id and str(form.id) != str(submission.form_id):
        view.problems.append(f"Submission belongs to form {submission.form_id}, not {form.id}")
        form = None

    rendered: Set[str] = set()
    if form is not None:
        view.title = form.title
        view.description = form.description
        for section in form.sections:
            sv = SectionView(id=section.id, title=section.title, description=section.description, kind=section.kind)
            if section.is_artist_step:
                sv.artist = submission.artist
            for f in section.fields:
                if f.name in rendered:
                    view.problems.append(f"Field name {f.name} appears more than once in the form")
                    continue
                rendered.add(f.name)
                sv.fields.append(render_field(f, answers.get(f.name), s))
            view.sections.append(sv)

    for name, value in answers.items():
        if name not in rendered:
            view.unmapped_answers[name] = _display_any(value)

    if view.problems:
        logger.info("submission %s rendered with problems: %s", submission.id, view.problems)
    return view


class SubmissionViewer:
    """
    Read-only handle on one submission for display and export.

    Export and sharing go through the document collaborator using the stored
    answers as the only source of truth.
    """

    def __init__(
        self,
        submission: Submission,
        form: Optional[ConsentForm],
        *,
        documents: Optional[DocumentService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.submission = submission
        self.form = form
        self.documents = documents
        self.settings = settings or load_settings()
        self.view = render_submission(submission, form, settings=self.settings)

    @classmethod
    async def open(
        cls,
        store: FormStore,
        submission: Submission,
        *,
        documents: Optional[DocumentService] = None,
        settings: Optional[Settings] = None,
    ) -> "SubmissionViewer":
        form: Optional[ConsentForm] = None
        if submission.form_id:
            try:
                raw = await call_collaborator("load_form", store.load_form, submission.form_id)
            except CollaboratorError:
                logger.warning("form %s could not be loaded for submission %s", submission.form_id, submission.id)
                raw = None
            if raw is not None:
                form = raw if isinstance(raw, ConsentForm) else ConsentForm.model_validate(raw)
        return cls(submission, form, documents=documents, settings=settings)

    def _require_documents(self) -> DocumentService:
        if self.documents is None:
            raise ConsentFormError("No document service configured")
        if self.form is None or not self.view.sections:
            raise ConsentFormError("Cannot build a document without the submission's form")
        return self.documents

    async def export(self) -> Any:
        documents = self._require_documents()
        return await call_collaborator("render_document", documents.render, self.submission, self.form)

    async def share(self, recipient: Optional[str] = None) -> Any:
        documents = self._require_documents()
        to = recipient or self.submission.answers.get(self.settings.respondent_email_field)
        if not isinstance(to, str) or is_blank(to):
            raise ConsentFormError("No recipient for the document")
        document = await call_collaborator("render_document", documents.render, self.submission, self.form)
        await call_collaborator("deliver_document", documents.deliver, document, to.strip())
        return document
