"""
Structural checks for authored forms.

`validate_form` never raises for a malformed form; it names every violated
rule so the builder can show them all at once.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .schemas import CHOICE_TYPES, ConsentForm


@dataclass(frozen=True)
class SchemaError:
    code: str
    message: str
    section_id: Optional[str] = None
    field_id: Optional[str] = None
    field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def validate_form(form: ConsentForm) -> List[SchemaError]:
    errors: List[SchemaError] = []

    if not (form.title or "").strip():
        errors.append(SchemaError("empty_title", "Form title is required"))
    if not form.sections:
        errors.append(SchemaError("no_sections", "Form needs at least one section"))

    seen_sections: set[str] = set()
    names: Dict[str, str] = {}
    artist_steps = 0

    for section in form.sections:
        if section.id in seen_sections:
            errors.append(
                SchemaError("duplicate_section_id", f"Section id '{section.id}' is used more than once", section_id=section.id)
            )
        seen_sections.add(section.id)

        if section.is_artist_step:
            artist_steps += 1
            if section.fields:
                errors.append(
                    SchemaError(
                        "artist_step_fields",
                        f"Artist selection step '{section.title}' cannot hold fields",
                        section_id=section.id,
                    )
                )

        seen_fields: set[str] = set()
        for f in section.fields:
            if f.id in seen_fields:
                errors.append(
                    SchemaError(
                        "duplicate_field_id",
                        f"Field id '{f.id}' is used more than once in section '{section.title}'",
                        section_id=section.id,
                        field_id=f.id,
                    )
                )
            seen_fields.add(f.id)

            name = (f.name or "").strip()
            if not name:
                errors.append(
                    SchemaError(
                        "blank_field_name",
                        f"Field '{f.label or f.id}' needs a name",
                        section_id=section.id,
                        field_id=f.id,
                    )
                )
            elif name in names:
                errors.append(
                    SchemaError(
                        "duplicate_field_name",
                        f"Field name '{name}' is already used in section '{names[name]}'",
                        section_id=section.id,
                        field_id=f.id,
                        field_name=name,
                    )
                )
            else:
                names[name] = section.title or section.id

            if f.type in CHOICE_TYPES and not f.options:
                errors.append(
                    SchemaError(
                        "missing_options",
                        f"Field '{f.label or name}' ({f.type}) needs at least one option",
                        section_id=section.id,
                        field_id=f.id,
                        field_name=name or None,
                    )
                )

    if artist_steps > 1:
        errors.append(SchemaError("multiple_artist_steps", "Only one artist selection step is allowed"))

    return errors
