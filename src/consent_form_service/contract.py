"""
JSON Schema contract for documents handed to the form store.

Schemas are generated from the pydantic models (serialization shape) so the
host application can validate stored rows independently of this package.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema

from .schemas import ConsentForm, Submission


@lru_cache(maxsize=1)
def form_json_schema() -> Dict[str, Any]:
    return ConsentForm.model_json_schema(mode="serialization")


@lru_cache(maxsize=1)
def submission_json_schema() -> Dict[str, Any]:
    return Submission.model_json_schema(mode="serialization")


@lru_cache(maxsize=1)
def _form_validator() -> jsonschema.Validator:
    return jsonschema.Draft202012Validator(form_json_schema())


@lru_cache(maxsize=1)
def _submission_validator() -> jsonschema.Validator:
    return jsonschema.Draft202012Validator(submission_json_schema())


def _error_messages(validator: jsonschema.Validator, body: Any) -> List[str]:
    errors = sorted(validator.iter_errors(body), key=lambda e: list(e.path))
    out: List[str] = []
    for e in errors:
        path = "/".join(str(p) for p in e.path) or "<root>"
        out.append(f"{path}: {e.message}")
    return out


def form_document_errors(body: Any) -> List[str]:
    return _error_messages(_form_validator(), body)


def submission_document_errors(body: Any) -> List[str]:
    return _error_messages(_submission_validator(), body)


def validate_form_document(body: Any) -> None:
    errors = form_document_errors(body)
    if errors:
        raise ValueError(f"Form document does not match schema at {errors[0]}")


def validate_submission_document(body: Any) -> None:
    errors = submission_document_errors(body)
    if errors:
        raise ValueError(f"Submission document does not match schema at {errors[0]}")
