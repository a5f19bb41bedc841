from kp_case_matcher.case_matcher.registry import Case, CaseLookup, CaseRegistry, build_registry
from kp_case_matcher.case_matcher.factory import (
    CaseMatcher,
    DispatchErr,
    DispatchFunction,
    DispatchOk,
    create_matcher,
)
from kp_case_matcher.case_matcher.debug import DebugDispatch
from kp_case_matcher.case_matcher.dtos import CaseVocabularyDTO, MatcherDescriptionDTO, load_vocabulary
from kp_case_matcher.case_matcher.utils import set_difference
