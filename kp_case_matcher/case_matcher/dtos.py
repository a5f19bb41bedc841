from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from kp_case_matcher.case_matcher.registry import RegisterFn


class CaseVocabularyDTO(BaseModel):
    """
    Vocabulario de casos cargado desde JSON/dict, p.ej.:

        {"name": "sign", "cases": ["positive", "negative", "zero"]}
    """
    model_config = ConfigDict(extra="ignore", frozen=True)
    name: Optional[str] = None
    cases: List[str]
    include_default: bool = False

    @field_validator("cases")
    @classmethod
    def _no_duplicates(cls, cases: List[str]) -> List[str]:
        seen = set()
        dupes = []
        for c in cases:
            if c in seen:
                dupes.append(c)
            seen.add(c)
        if dupes:
            raise ValueError(f"duplicated case names: {dupes}")
        return cases

    def register_into(self, register: RegisterFn) -> None:
        for case_name in self.cases:
            register(case_name)
        if self.include_default:
            register()

    def to_json(self):
        return self.model_dump_json()


class MatcherDescriptionDTO(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    name: Optional[str]
    cases: List[str]
    has_default: bool
    total_cases: int

    def to_json(self):
        return self.model_dump_json()


def load_vocabulary(data: Union[str, bytes, Dict[str, Any]]) -> CaseVocabularyDTO:
    if isinstance(data, (str, bytes)):
        return CaseVocabularyDTO.model_validate_json(data)
    return CaseVocabularyDTO.model_validate(data)
