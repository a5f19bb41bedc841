from typing import Any, Iterable, Optional


class CaseMatcherException(Exception):
    """Base class for all case-matcher exceptions."""
    def __init__(self, message: str, cases: Optional[Iterable[Any]] = None, matcher: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cases = list(cases) if cases is not None else []
        self.matcher = matcher


def _names(cases: Iterable[Any]) -> list:
    return [str(c) for c in cases]


class UndeclaredCaseReferenced(CaseMatcherException, LookupError):
    def __init__(self, case_name: Any, matcher: Optional[str] = None):
        super().__init__(f"Referenced undefined case name: {case_name}", [case_name], matcher)
        self.case_name = case_name


class CaseCoverageError(CaseMatcherException, ValueError):
    """Handler table does not cover the registered cases exactly."""


class MissingCasesError(CaseCoverageError):
    def __init__(self, cases: Iterable[Any], matcher: Optional[str] = None):
        cases = list(cases)
        super().__init__(f"Case-matching dispatcher is missing the following cases: {_names(cases)}", cases, matcher)


class ExtraneousCasesError(CaseCoverageError):
    def __init__(self, cases: Iterable[Any], matcher: Optional[str] = None):
        cases = list(cases)
        super().__init__(f"Case-matching dispatcher contains the following unregistered cases: {_names(cases)}", cases, matcher)


class UnknownCaseAtDispatch(CaseMatcherException, LookupError):
    def __init__(self, case: Any, matcher: Optional[str] = None):
        super().__init__(f"Could not find case in registered cases: {case}", [case], matcher)
        self.case = case


class DuplicateCaseError(CaseMatcherException, ValueError):
    def __init__(self, case: Any, matcher: Optional[str] = None):
        super().__init__(f"Case registered more than once: {case}", [case], matcher)
        self.case = case
