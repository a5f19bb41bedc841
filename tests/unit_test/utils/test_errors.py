import pytest

from kp_case_matcher.case_matcher.registry import Case
from kp_case_matcher.utils.errors import (
    CaseCoverageError,
    CaseMatcherException,
    DuplicateCaseError,
    ExtraneousCasesError,
    MissingCasesError,
    UndeclaredCaseReferenced,
    UnknownCaseAtDispatch,
)


def test_missing_cases_error_message():
    err = MissingCasesError([Case("b"), Case("c")], matcher="abc")
    assert err.message == "Case-matching dispatcher is missing the following cases: ['b', 'c']"
    assert err.cases == [Case("b"), Case("c")]
    assert err.matcher == "abc"


def test_extraneous_cases_error_message():
    err = ExtraneousCasesError(["undefined case"])
    assert str(err) == "Case-matching dispatcher contains the following unregistered cases: ['undefined case']"


def test_undeclared_case_referenced():
    err = UndeclaredCaseReferenced("nope")
    assert str(err) == "Referenced undefined case name: nope"
    assert err.cases == ["nope"]


def test_unknown_case_at_dispatch():
    err = UnknownCaseAtDispatch("c")
    assert str(err) == "Could not find case in registered cases: c"
    assert err.case == "c"


@pytest.mark.parametrize("err, bases", [
    (MissingCasesError([]), (CaseCoverageError, ValueError)),
    (ExtraneousCasesError([]), (CaseCoverageError, ValueError)),
    (UndeclaredCaseReferenced("x"), (LookupError,)),
    (UnknownCaseAtDispatch("x"), (LookupError,)),
    (DuplicateCaseError("x"), (ValueError,)),
])
def test_error_hierarchy(err, bases):
    assert isinstance(err, CaseMatcherException)
    for base in bases:
        assert isinstance(err, base)
