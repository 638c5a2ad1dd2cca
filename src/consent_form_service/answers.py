"""
Answer shapes per field type.

    text | textarea | date | radio | select | file | image -> str
    checkbox without options                                -> bool
    checkbox with options                                   -> frozenset[str]
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, FrozenSet, Literal, Optional, Union

from .errors import AnswerTypeError
from .schemas import FormField

AnswerKind = Literal["text", "flag", "choices"]
AnswerValue = Union[str, bool, FrozenSet[str]]


def answer_kind(field: FormField) -> AnswerKind:
    if field.is_flag:
        return "flag"
    if field.is_choice_group:
        return "choices"
    return "text"


def _as_choices(field: FormField, value: Any) -> FrozenSet[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise AnswerTypeError(f"{field.name} expects a collection of options, got {type(value).__name__}")
    out = set()
    for item in value:
        if not isinstance(item, str):
            raise AnswerTypeError(f"{field.name} options must be strings, got {type(item).__name__}")
        t = item.strip()
        if t:
            out.add(t)
    return frozenset(out)


def _as_text(field: FormField, value: Any) -> str:
    if field.type == "date" and isinstance(value, (date, datetime)):
        if isinstance(value, datetime):
            value = value.date()
        return value.isoformat()
    if not isinstance(value, str):
        raise AnswerTypeError(f"{field.name} ({field.type}) expects a string, got {type(value).__name__}")
    return value


def coerce_answer(field: FormField, value: Any) -> Optional[AnswerValue]:
    """
    Normalize `value` to the answer shape of `field`.

    `None` means "no answer" and is returned unchanged.
    """
    if value is None:
        return None
    kind = answer_kind(field)
    if kind == "flag":
        if not isinstance(value, bool):
            raise AnswerTypeError(f"{field.name} expects true/false, got {type(value).__name__}")
        return value
    if kind == "choices":
        return _as_choices(field, value)
    return _as_text(field, value)


def selected_options(value: Any) -> FrozenSet[str]:
    """Read a stored choice-group answer (set, list or single string) as a frozenset."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value]) if value.strip() else frozenset()
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(v) for v in value if str(v or "").strip())
    return frozenset()


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
