"""
Step-by-step runtime for one respondent filling in one consent form.

States:

    Step(i)  --next_step (valid, i < last)-->  Step(i+1)
    Step(last) --next_step (valid)--> pending_submit --submit ok--> submitted
    pending_submit --submit fails--> pending_submit (retry with submit())
    any open state --cancel--> cancelled

`previous_step` never re-validates and keeps answers. Events sent after
`submitted` or `cancelled` raise WizardStateError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Set, Union

from ..answers import coerce_answer, is_blank, selected_options
from ..collaborators import DocumentService, FormStore, call_collaborator
from ..config import Settings, load_settings
from ..contract import validate_submission_document
from ..errors import AnswerTypeError, CollaboratorError, WizardStateError
from ..schemas import Artist, ClientProfile, ConsentForm, FormSection, Submission
from .artists import as_artist
from .prefill import build_prefill
from .rules import ARTIST_ERROR_KEY, MedicalHistoryRule, cross_field_updates, validate_step

logger = logging.getLogger("consent_forms.wizard")

WizardStatus = Literal["in_progress", "pending_submit", "submitted", "cancelled"]

_TERMINAL = {"submitted", "cancelled"}


@dataclass
class StepResult:
    ok: bool
    status: WizardStatus
    step_index: int
    errors: Dict[str, str] = field(default_factory=dict)
    submit_error: Optional[str] = None


class Wizard:
    def __init__(
        self,
        form: ConsentForm,
        *,
        store: Optional[FormStore] = None,
        documents: Optional[DocumentService] = None,
        respondent_id: Optional[str] = None,
        event_id: Optional[str] = None,
        profile: Optional[Union[ClientProfile, Mapping[str, Any]]] = None,
        procedure_type: Optional[str] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not form.sections:
            raise ValueError("Cannot run a form without sections")
        self.form = form
        self.store = store
        self.documents = documents
        self.settings = settings or load_settings()
        self.rule = MedicalHistoryRule.from_settings(self.settings)
        self.respondent_id = respondent_id
        self.event_id = event_id or form.event_id
        self.procedure_type = procedure_type or self.settings.procedure_type
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self.status: WizardStatus = "in_progress"
        self.step_index = 0
        self.errors: Dict[str, str] = {}
        self.selected_artist: Optional[Artist] = None
        self.pending_submission: Optional[Submission] = None
        self.submission: Optional[Submission] = None
        self.submit_error: Optional[CollaboratorError] = None
        self._answers: Dict[str, Any] = {}
        self._edited: Set[str] = set()

        if profile is not None:
            self.apply_prefill(profile)

    # -- read-only state ------------------------------------------------------

    @property
    def answers(self) -> Dict[str, Any]:
        return dict(self._answers)

    @property
    def total_steps(self) -> int:
        return len(self.form.sections)

    @property
    def current_section(self) -> FormSection:
        return self.form.sections[self.step_index]

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index == self.total_steps - 1

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL

    @property
    def selected_artist_id(self) -> Optional[str]:
        return self.selected_artist.id if self.selected_artist is not None else None

    def _require_open(self, event: str) -> None:
        if self.status in _TERMINAL:
            raise WizardStateError(f"{event} is not allowed once the wizard is {self.status}")

    # -- answers --------------------------------------------------------------

    def _write(self, name: str, value: Any) -> None:
        if value is None:
            self._answers.pop(name, None)
        else:
            self._answers[name] = value

    def set_answer(self, name: str, value: Any) -> None:
        """
        Record an answer, applying the cross-field rules in the same call.

        Values are normalized to the field's answer shape; a wrong shape raises
        AnswerTypeError and nothing is written. `None` removes the answer.
        """
        self._require_open("set_answer")
        f = self.form.field_by_name(name)
        value = coerce_answer(f, value) if f is not None else value

        if self.status == "pending_submit":
            self._reopen_last_step()

        self._write(name, value)
        for k, v in cross_field_updates(self.form, self.rule, name, value).items():
            self._write(k, v)
        self._edited.add(name)
        self.errors.pop(name, None)

    def toggle_option(self, name: str, option: str, checked: Optional[bool] = None) -> None:
        f = self.form.field_by_name(name)
        if f is None or not f.is_choice_group:
            raise AnswerTypeError(f"{name} is not a multi-option checkbox field")
        current = selected_options(self._answers.get(name))
        if checked is None:
            checked = option not in current
        self.set_answer(name, current | {option} if checked else current - {option})

    def apply_prefill(self, profile: Union[ClientProfile, Mapping[str, Any]]) -> Dict[str, Any]:
        """Seed answers from a known respondent; edited answers are never overwritten."""
        self._require_open("apply_prefill")
        updates = build_prefill(self.form, profile, self.rule, current=self._answers, edited=self._edited)
        for k, v in updates.items():
            self._write(k, v)
        if self.respondent_id is None:
            pid = profile.id if isinstance(profile, ClientProfile) else profile.get("id")
            if pid is not None:
                self.respondent_id = str(pid)
        if updates:
            logger.debug("prefilled %s", sorted(updates))
        return updates

    # -- artist step ----------------------------------------------------------

    def select_artist(self, artist: Union[Artist, Mapping[str, Any]]) -> None:
        self._require_open("select_artist")
        if self.status != "in_progress" or not self.current_section.is_artist_step:
            raise WizardStateError("select_artist is only available on the artist selection step")
        self.selected_artist = as_artist(artist)
        self.errors.pop(ARTIST_ERROR_KEY, None)

    # -- navigation -----------------------------------------------------------

    def validate_step(self, index: int) -> Dict[str, str]:
        return validate_step(
            self.form.sections[index],
            self._answers,
            selected_artist_id=self.selected_artist_id,
            rule=self.rule,
        )

    def _result(self, ok: bool) -> StepResult:
        return StepResult(
            ok=ok,
            status=self.status,
            step_index=self.step_index,
            errors=dict(self.errors),
            submit_error=str(self.submit_error) if self.submit_error else None,
        )

    async def next_step(self) -> StepResult:
        """
        Validate the current step and advance.

        On the last step a valid `next_step` assembles the submission and
        attempts `submit()`; a store failure leaves the wizard pending with
        `submit_error` set.
        """
        self._require_open("next_step")
        if self.status == "pending_submit":
            raise WizardStateError("Submission is pending; call submit() to retry")

        errors = self.validate_step(self.step_index)
        self.errors = errors
        if errors:
            logger.debug("step %s blocked: %s", self.step_index, sorted(errors))
            return self._result(False)

        if self.step_index + 1 < self.total_steps:
            self.step_index += 1
            logger.debug("advanced to step %s", self.step_index)
            return self._result(True)

        self.status = "pending_submit"
        self.pending_submission = self._assemble()
        try:
            await self.submit()
        except CollaboratorError:
            return self._result(False)
        return self._result(True)

    def previous_step(self) -> None:
        self._require_open("previous_step")
        if self.status == "pending_submit":
            self._reopen_last_step()
            return
        if self.step_index == 0:
            return
        self.step_index -= 1
        self.errors = {}

    def cancel(self) -> None:
        self._require_open("cancel")
        self.status = "cancelled"
        self.pending_submission = None
        logger.debug("wizard cancelled at step %s", self.step_index)

    def _reopen_last_step(self) -> None:
        self.status = "in_progress"
        self.step_index = self.total_steps - 1
        self.pending_submission = None
        self.submit_error = None

    # -- submission -----------------------------------------------------------

    def _assemble(self) -> Submission:
        artist = self.selected_artist if self.form.has_artist_step else None
        return Submission(
            form_id=self.form.id,
            event_id=self.event_id,
            respondent_id=self.respondent_id,
            selected_artist_id=artist.id if artist is not None else None,
            artist=artist,
            procedure_type=self.procedure_type,
            answers=dict(self._answers),
            submitted_at=self._clock(),
        )

    async def submit(self) -> Submission:
        """
        Persist the assembled submission.

        Only valid while pending. Retrying after a failure sends the same
        assembled submission again.
        """
        if self.status != "pending_submit" or self.pending_submission is None:
            raise WizardStateError(f"submit() requires a pending submission (wizard is {self.status})")

        submission = self.pending_submission
        if self.store is not None:
            validate_submission_document(submission.model_dump(mode="json"))
            try:
                submission_id = await call_collaborator("save_submission", self.store.save_submission, submission)
            except CollaboratorError as e:
                self.submit_error = e
                raise
            submission = submission.model_copy(update={"id": str(submission_id)})

        self.submission = submission
        self.pending_submission = None
        self.submit_error = None
        self.status = "submitted"
        logger.info("submitted form %s (submission %s)", submission.form_id, submission.id)

        await self._notify(submission)
        return submission

    async def _notify(self, submission: Submission) -> None:
        if self.documents is None or not self.settings.notify_on_submit:
            return
        recipient = submission.answers.get(self.settings.respondent_email_field)
        if not isinstance(recipient, str) or is_blank(recipient):
            return
        try:
            document = await call_collaborator("render_document", self.documents.render, submission, self.form)
            await call_collaborator("deliver_document", self.documents.deliver, document, recipient.strip())
        except CollaboratorError:
            # The submission is already stored; delivery problems are reported only.
            logger.exception("post-submit delivery failed for submission %s", submission.id)
