"""
Dispatchers exhaustivos sobre un conjunto cerrado de casos.

Se registra el vocabulario y el indexer una vez (`create_matcher`); cada
handler table se valida contra ese vocabulario antes de generar el
dispatcher, así que un caso faltante o desconocido falla al construir y
no en la primera llamada.
"""

__version__ = "0.1.0"

from kp_case_matcher.case_matcher import (
    Case,
    CaseLookup,
    CaseMatcher,
    CaseRegistry,
    CaseVocabularyDTO,
    DebugDispatch,
    DispatchErr,
    DispatchFunction,
    DispatchOk,
    MatcherDescriptionDTO,
    create_matcher,
    load_vocabulary,
    set_difference,
)
from kp_case_matcher.utils.errors import (
    CaseCoverageError,
    CaseMatcherException,
    DuplicateCaseError,
    ExtraneousCasesError,
    MissingCasesError,
    UndeclaredCaseReferenced,
    UnknownCaseAtDispatch,
)
