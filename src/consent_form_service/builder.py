"""
Authoring operations for consent forms.

Every operation is pure: it takes a `ConsentForm` and returns a new one,
leaving the input untouched. Section and field `order` values stay dense
(0..n-1) after every mutation. Unknown section/field ids raise
`UnknownSectionError` / `UnknownFieldError`.

`FormBuilder` wraps these for an editor that keeps one current form.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from .collaborators import FormStore, call_collaborator
from .config import load_settings
from .contract import validate_form_document
from .errors import BuilderError, UnknownFieldError, UnknownSectionError
from .ordering import Direction, adjacent_index, normalize_order, reorder
from .schemas import LEGACY_ARTIST_SECTION_TITLE, ConsentForm, FieldType, FormField, FormSection, SectionKind
from .templates import default_consent_form
from .validation import SchemaError, validate_form

logger = logging.getLogger("consent_forms.builder")

M = TypeVar("M", bound=BaseModel)

_FORM_PROTECTED = {"id", "sections"}
_SECTION_PROTECTED = {"id", "order", "fields"}
_FIELD_PROTECTED = {"id", "order"}


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _fresh_field_name(form: ConsentForm) -> str:
    taken = {f.name for _, f in form.iter_fields()}
    n = load_settings().field_name_hex_length
    while True:
        name = f"field_{uuid.uuid4().hex[:n]}"
        if name not in taken:
            return name


def _apply_patch(model: M, patch: Mapping[str, Any], protected: set[str], cls: Type[M]) -> M:
    keys = set(patch)
    blocked = keys & protected
    if blocked:
        raise BuilderError(f"{cls.__name__} keys cannot be patched: {sorted(blocked)}")
    unknown = keys - set(cls.model_fields)
    if unknown:
        raise BuilderError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    data = model.model_dump()
    data.update(dict(patch))
    return cls.model_validate(data)


def _section_index(form: ConsentForm, section_id: str) -> int:
    idx = form.section_index(section_id)
    if idx < 0:
        raise UnknownSectionError(section_id)
    return idx


def _field_index(section: FormSection, field_id: str) -> int:
    for i, f in enumerate(section.fields):
        if f.id == field_id:
            return i
    raise UnknownFieldError(section.id, field_id)


def _with_sections(form: ConsentForm, sections: List[FormSection]) -> ConsentForm:
    return form.model_copy(update={"sections": sections})


def _with_section(form: ConsentForm, idx: int, section: FormSection) -> ConsentForm:
    sections = list(form.sections)
    sections[idx] = section
    return _with_sections(form, sections)


def _with_fields(form: ConsentForm, idx: int, fields: List[FormField]) -> ConsentForm:
    return _with_section(form, idx, form.sections[idx].model_copy(update={"fields": fields}))


# -- form ---------------------------------------------------------------------


def update_form(form: ConsentForm, patch: Mapping[str, Any]) -> ConsentForm:
    """Edit title, description, event or the medical-history flag."""
    return _apply_patch(form, patch, _FORM_PROTECTED, ConsentForm).model_copy(update={"sections": list(form.sections)})


# -- sections -----------------------------------------------------------------


def add_section(
    form: ConsentForm,
    *,
    title: str = "New Section",
    description: str = "",
    kind: SectionKind = "fields",
) -> ConsentForm:
    section = FormSection(
        id=_new_id(),
        title=title,
        description=description,
        required=True,
        order=len(form.sections),
        kind=kind,
        fields=[],
    )
    return _with_sections(form, [*form.sections, section])


def add_artist_step(form: ConsentForm) -> ConsentForm:
    return add_section(
        form,
        title=LEGACY_ARTIST_SECTION_TITLE,
        description="Select the artist for your procedure",
        kind="artist_selection",
    )


def update_section(form: ConsentForm, section_id: str, patch: Mapping[str, Any]) -> ConsentForm:
    idx = _section_index(form, section_id)
    current = form.sections[idx]
    updated = _apply_patch(current, patch, _SECTION_PROTECTED, FormSection)
    return _with_section(form, idx, updated.model_copy(update={"fields": list(current.fields)}))


def remove_section(form: ConsentForm, section_id: str) -> ConsentForm:
    idx = _section_index(form, section_id)
    remaining = [s for i, s in enumerate(form.sections) if i != idx]
    return _with_sections(form, normalize_order(remaining))


def move_section(form: ConsentForm, section_id: str, direction: Direction) -> ConsentForm:
    idx = _section_index(form, section_id)
    target = adjacent_index(idx, direction, len(form.sections))
    if target == idx:
        return form
    return _with_sections(form, reorder(form.sections, idx, target))


# -- fields -------------------------------------------------------------------


def add_field(form: ConsentForm, section_id: str, *, field_type: FieldType = "text") -> ConsentForm:
    idx = _section_index(form, section_id)
    section = form.sections[idx]
    if section.is_artist_step:
        raise BuilderError(f"Artist selection step {section_id} cannot hold fields")
    new_field = FormField(
        id=f"{section.id}-{_new_id()}",
        name=_fresh_field_name(form),
        type=field_type,
        label="New Field",
        placeholder="",
        options=[],
        required=True,
        order=len(section.fields),
    )
    return _with_fields(form, idx, [*section.fields, new_field])


def update_field(form: ConsentForm, section_id: str, field_id: str, patch: Mapping[str, Any]) -> ConsentForm:
    idx = _section_index(form, section_id)
    section = form.sections[idx]
    fidx = _field_index(section, field_id)
    fields = list(section.fields)
    fields[fidx] = _apply_patch(fields[fidx], patch, _FIELD_PROTECTED, FormField)
    return _with_fields(form, idx, fields)


def remove_field(form: ConsentForm, section_id: str, field_id: str) -> ConsentForm:
    idx = _section_index(form, section_id)
    section = form.sections[idx]
    fidx = _field_index(section, field_id)
    remaining = [f for i, f in enumerate(section.fields) if i != fidx]
    return _with_fields(form, idx, normalize_order(remaining))


def move_field(form: ConsentForm, section_id: str, field_id: str, direction: Direction) -> ConsentForm:
    idx = _section_index(form, section_id)
    section = form.sections[idx]
    fidx = _field_index(section, field_id)
    target = adjacent_index(fidx, direction, len(section.fields))
    if target == fidx:
        return form
    return _with_fields(form, idx, reorder(section.fields, fidx, target))


# -- saving -------------------------------------------------------------------


@dataclass
class SaveResult:
    ok: bool
    form_id: Optional[str] = None
    form: Optional[ConsentForm] = None
    errors: List[SchemaError] = field(default_factory=list)

    def error_dicts(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.errors]


async def save_form(form: ConsentForm, store: FormStore) -> SaveResult:
    """
    Validate and hand the form to the store.

    Schema problems are returned (nothing is sent to the store). A store
    failure raises CollaboratorError and the form is left as it was.
    """
    errors = validate_form(form)
    if errors:
        logger.info("save refused for form %s: %s", form.id or "<new>", [e.code for e in errors])
        return SaveResult(ok=False, errors=errors)

    validate_form_document(form.model_dump(mode="json"))
    form_id = await call_collaborator("save_form", store.save_form, form)
    form_id = str(form_id)
    logger.debug("saved form %s", form_id)
    return SaveResult(ok=True, form_id=form_id, form=form.model_copy(update={"id": form_id}))


class FormBuilder:
    """
    Single-author editor session around one form.

    Mutating methods replace `self.form`; the ones that create something
    return the new id.
    """

    def __init__(self, form: Optional[ConsentForm] = None, *, store: Optional[FormStore] = None) -> None:
        self.form = form if form is not None else ConsentForm(title="New Consent Form", requires_medical_history=True)
        self.store = store

    @classmethod
    def from_template(cls, *, store: Optional[FormStore] = None, event_id: Optional[str] = None) -> "FormBuilder":
        return cls(default_consent_form(event_id=event_id), store=store)

    @classmethod
    async def load(cls, store: FormStore, form_id: str) -> "FormBuilder":
        raw = await call_collaborator("load_form", store.load_form, form_id)
        form = raw if isinstance(raw, ConsentForm) else ConsentForm.model_validate(raw)
        return cls(form, store=store)

    @property
    def errors(self) -> List[SchemaError]:
        return validate_form(self.form)

    def update_form(self, **patch: Any) -> None:
        self.form = update_form(self.form, patch)

    def add_section(self, **kwargs: Any) -> str:
        self.form = add_section(self.form, **kwargs)
        return self.form.sections[-1].id

    def add_artist_step(self) -> str:
        self.form = add_artist_step(self.form)
        return self.form.sections[-1].id

    def update_section(self, section_id: str, **patch: Any) -> None:
        self.form = update_section(self.form, section_id, patch)

    def remove_section(self, section_id: str) -> None:
        self.form = remove_section(self.form, section_id)

    def move_section(self, section_id: str, direction: Direction) -> None:
        self.form = move_section(self.form, section_id, direction)

    def add_field(self, section_id: str, *, field_type: FieldType = "text") -> str:
        self.form = add_field(self.form, section_id, field_type=field_type)
        return self.form.sections[_section_index(self.form, section_id)].fields[-1].id

    def update_field(self, section_id: str, field_id: str, **patch: Any) -> None:
        self.form = update_field(self.form, section_id, field_id, patch)

    def remove_field(self, section_id: str, field_id: str) -> None:
        self.form = remove_field(self.form, section_id, field_id)

    def move_field(self, section_id: str, field_id: str, direction: Direction) -> None:
        self.form = move_field(self.form, section_id, field_id, direction)

    async def save(self) -> SaveResult:
        if self.store is None:
            raise BuilderError("No form store configured")
        result = await save_form(self.form, self.store)
        if result.ok and result.form is not None:
            self.form = result.form
        return result
