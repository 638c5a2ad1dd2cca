"""
Schema models for authored consent forms.

A `ConsentForm` is the template: ordered `FormSection`s, each holding ordered
`FormField`s. Stored rows from the events backend use the `field_*` /
`is_required` / `display_order` column names; those are accepted as input
aliases so a row can be validated straight into a model.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Literal, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

FieldType = Literal["text", "textarea", "checkbox", "radio", "select", "date", "file", "image"]
SectionKind = Literal["fields", "artist_selection"]

FIELD_TYPES: Tuple[str, ...] = ("text", "textarea", "checkbox", "radio", "select", "date", "file", "image")
CHOICE_TYPES = {"radio", "select"}
PLACEHOLDER_TYPES = {"text", "textarea"}

# Older forms marked the artist step only by its title.
LEGACY_ARTIST_SECTION_TITLE = "Your Artist"


def _coerce_id(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(int(v))
    return v


def _ordered(items: List[Any]) -> List[Any]:
    # Stable: equal `order` values keep their incoming positions.
    return sorted(items, key=lambda item: item.order)


class FormField(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Stable id, unique within its section")
    name: str = Field(
        ...,
        description="Answer key in submissions (unique across the form)",
        validation_alias=AliasChoices("name", "field_name", "fieldName"),
    )
    type: FieldType = Field(default="text", validation_alias=AliasChoices("type", "field_type", "fieldType"))
    label: str = Field(default="", validation_alias=AliasChoices("label", "field_label", "fieldLabel"))
    placeholder: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("placeholder", "field_placeholder", "fieldPlaceholder"),
    )
    options: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("options", "field_options", "fieldOptions"),
    )
    required: bool = Field(default=False, validation_alias=AliasChoices("required", "is_required", "isRequired"))
    order: int = Field(default=0, validation_alias=AliasChoices("order", "display_order", "displayOrder"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("options", mode="before")
    @classmethod
    def _clean_options(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            # Builder text areas hold one option per line.
            v = v.split("\n")
        if isinstance(v, (list, tuple)):
            return [str(o).strip() for o in v if str(o or "").strip()]
        return v

    @property
    def is_choice_group(self) -> bool:
        """Checkbox with options: the answer is a set of selected options."""
        return self.type == "checkbox" and bool(self.options)

    @property
    def is_flag(self) -> bool:
        """Checkbox without options: the answer is a boolean."""
        return self.type == "checkbox" and not self.options


class FormSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    description: Optional[str] = None
    required: bool = Field(default=True, validation_alias=AliasChoices("required", "is_required", "isRequired"))
    order: int = Field(default=0, validation_alias=AliasChoices("order", "display_order", "displayOrder"))
    kind: SectionKind = "fields"
    fields: List[FormField] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _detect_legacy_artist_step(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("kind"):
            return data
        title = str(data.get("title") or "").strip()
        if title == LEGACY_ARTIST_SECTION_TITLE and not data.get("fields"):
            out = dict(data)
            out["kind"] = "artist_selection"
            return out
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("fields")
    @classmethod
    def _fields_in_order(cls, v: List[FormField]) -> List[FormField]:
        return _ordered(v)

    @property
    def is_artist_step(self) -> bool:
        return self.kind == "artist_selection"

    def field_by_id(self, field_id: str) -> Optional[FormField]:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


class ConsentForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Absent until the form is first saved")
    event_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("event_id", "eventId"))
    title: str = ""
    description: Optional[str] = None
    requires_medical_history: bool = Field(
        default=False,
        validation_alias=AliasChoices("requires_medical_history", "requiresMedicalHistory"),
    )
    sections: List[FormSection] = Field(default_factory=list)

    @field_validator("id", "event_id", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("sections")
    @classmethod
    def _sections_in_order(cls, v: List[FormSection]) -> List[FormSection]:
        return _ordered(v)

    def iter_fields(self) -> Iterator[Tuple[FormSection, FormField]]:
        for section in self.sections:
            for f in section.fields:
                yield section, f

    def field_by_name(self, name: str) -> Optional[FormField]:
        for _, f in self.iter_fields():
            if f.name == name:
                return f
        return None

    def section_by_id(self, section_id: str) -> Optional[FormSection]:
        for s in self.sections:
            if s.id == section_id:
                return s
        return None

    def section_index(self, section_id: str) -> int:
        for i, s in enumerate(self.sections):
            if s.id == section_id:
                return i
        return -1

    @property
    def has_artist_step(self) -> bool:
        return any(s.is_artist_step for s in self.sections)


class Artist(BaseModel):
    """Entry from the event's artist directory."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str = ""
    email: Optional[str] = None
    booth_number: Optional[str] = Field(default=None, validation_alias=AliasChoices("booth_number", "boothNumber"))
    role: str = Field(default="artist", validation_alias=AliasChoices("role", "application_type", "applicationType"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)


class ClientProfile(BaseModel):
    """Known respondent data used to prefill a wizard."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_of_birth", "dateOfBirth", "dob"))
    address: Optional[str] = None
    medical_conditions: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("medical_conditions", "medicalConditions"),
    )
    allergies: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return _coerce_id(v)
