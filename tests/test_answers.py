from datetime import date, datetime

import pytest

from consent_form_service.answers import answer_kind, coerce_answer, is_blank, selected_options
from consent_form_service.errors import AnswerTypeError
from consent_form_service.schemas import FormField

FLAG = FormField(id="1", name="ageConfirm", type="checkbox")
GROUP = FormField(id="2", name="medicalIssues", type="checkbox", options=["Diabetes", "Epilepsy"])
TEXT = FormField(id="3", name="clientName", type="text")
DOB = FormField(id="4", name="DOB", type="date")


def test_answer_kinds():
    assert answer_kind(FLAG) == "flag"
    assert answer_kind(GROUP) == "choices"
    assert answer_kind(TEXT) == "text"
    assert answer_kind(FormField(id="5", name="r", type="radio", options=["a"])) == "text"


def test_flag_requires_bool():
    assert coerce_answer(FLAG, True) is True
    with pytest.raises(AnswerTypeError):
        coerce_answer(FLAG, "yes")


def test_choices_become_frozenset():
    assert coerce_answer(GROUP, ["Diabetes", " Epilepsy ", ""]) == frozenset({"Diabetes", "Epilepsy"})
    assert coerce_answer(GROUP, "Diabetes") == frozenset({"Diabetes"})
    with pytest.raises(AnswerTypeError):
        coerce_answer(GROUP, True)
    with pytest.raises(AnswerTypeError):
        coerce_answer(GROUP, [1])


def test_text_and_dates():
    assert coerce_answer(TEXT, "Jane") == "Jane"
    with pytest.raises(AnswerTypeError):
        coerce_answer(TEXT, 5)
    assert coerce_answer(DOB, date(1990, 2, 1)) == "1990-02-01"
    assert coerce_answer(DOB, datetime(1990, 2, 1, 12, 0)) == "1990-02-01"


def test_none_means_no_answer():
    assert coerce_answer(FLAG, None) is None
    assert coerce_answer(GROUP, None) is None


def test_helpers():
    assert selected_options(["a", "", None]) == frozenset({"a"})
    assert selected_options(" ") == frozenset()
    assert selected_options(None) == frozenset()
    assert is_blank("  ")
    assert is_blank(None)
    assert not is_blank(False)
