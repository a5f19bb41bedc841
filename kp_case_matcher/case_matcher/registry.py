from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Type, Union

from kp_case_matcher.utils.constants import DEFAULT_CASE_LABEL
from kp_case_matcher.utils.errors import DuplicateCaseError, UndeclaredCaseReferenced

CaseName = Optional[str]  # None = caso anónimo (default)


@dataclass(frozen=True)
class Case:
    """
    Token opaco que identifica un caso dentro del vocabulario de un matcher.

    Se genera al registrar el vocabulario; los builders de indexer y de
    handler table lo obtienen vía `CaseLookup`, nunca construyéndolo a mano.
    """
    name: CaseName

    @property
    def is_default(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return DEFAULT_CASE_LABEL if self.name is None else self.name


RegisterFn = Callable[..., Case]
CaseSource = Union[Iterable[str], Callable[[RegisterFn], Any], type]


@dataclass(frozen=True, eq=False)
class CaseRegistry(Mapping[CaseName, Case]):
    """
    Vocabulario cerrado de un matcher: name -> Case, en orden de registro.
    Inmutable una vez construido. Si el vocabulario vino de un Enum,
    `source_enum` permite usar sus miembros en lugar de los nombres.
    """
    entries: Mapping[CaseName, Case]
    matcher: Optional[str] = None
    source_enum: Optional[Type[Enum]] = None

    def __getitem__(self, name: CaseName) -> Case:
        return self.entries[name]

    def __iter__(self) -> Iterator[CaseName]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def cases(self) -> Tuple[Case, ...]:
        return tuple(self.entries.values())

    @property
    def has_default(self) -> bool:
        return None in self.entries

    def resolve(self, name: CaseName) -> Case:
        if name not in self.entries:
            raise UndeclaredCaseReferenced(DEFAULT_CASE_LABEL if name is None else name, matcher=self.matcher)
        return self.entries[name]

    def coerce(self, key: Any) -> Any:
        """
        Normaliza una key de handler table (o un resultado del indexer):
        un nombre registrado se convierte en su Case; cualquier otra cosa
        se devuelve tal cual para que el llamador la reporte.
        """
        if isinstance(key, Case):
            return key
        # antes que el chequeo de str: un miembro de StrEnum también es str
        if self.source_enum is not None and isinstance(key, self.source_enum):
            return self.entries[key.name]
        if isinstance(key, str) and key in self.entries:
            return self.entries[key]
        return key


@dataclass(frozen=True, eq=False)
class CaseLookup:
    """
    Capacidad de búsqueda segura sobre un `CaseRegistry`.

    Se pasa por valor a `make_indexer` y a cada `make_handler_table`:
        cases("even")  -> Case("even")
        cases()        -> caso default (si fue registrado)
        cases("nope")  -> UndeclaredCaseReferenced
    """
    registry: CaseRegistry = field(repr=False)

    def resolve(self, name: CaseName = None) -> Case:
        return self.registry.resolve(name)

    def __call__(self, name: CaseName = None) -> Case:
        return self.registry.resolve(name)

    def __contains__(self, name: object) -> bool:
        return name in self.registry


class _Registration:
    """Acumulador usado solo mientras se consume la fuente de casos."""

    def __init__(self, matcher: Optional[str], source_enum: Optional[Type[Enum]] = None) -> None:
        self._matcher = matcher
        self._source_enum = source_enum
        self._entries: Dict[CaseName, Case] = {}

    def register(self, name: CaseName = None) -> Case:
        if name is not None and not isinstance(name, str):
            raise TypeError(f"Case name must be a string, got {type(name).__name__}: {name!r}")
        if name == DEFAULT_CASE_LABEL:
            raise ValueError(f"Case name {DEFAULT_CASE_LABEL!r} is reserved for the anonymous case; use register()")
        if name in self._entries:
            raise DuplicateCaseError(DEFAULT_CASE_LABEL if name is None else name, matcher=self._matcher)
        case = Case(name)
        self._entries[name] = case
        return case

    def freeze(self) -> CaseRegistry:
        return CaseRegistry(entries=MappingProxyType(dict(self._entries)), matcher=self._matcher, source_enum=self._source_enum)


def build_registry(case_source: CaseSource, *, matcher: Optional[str] = None) -> CaseRegistry:
    """
    Consume la fuente de casos completa y devuelve el registro congelado.

    Fuentes soportadas:
      - lista (o iterable) de nombres: ["even", "odd"]
      - subclase de Enum: se registran los nombres de sus miembros; los
        miembros mismos sirven luego como keys o resultado del indexer
      - callback de registro: lambda register: (register("a"), register())
    """
    if isinstance(case_source, type) and issubclass(case_source, Enum):
        reg = _Registration(matcher, source_enum=case_source)
        for member in case_source:
            reg.register(member.name)
        return reg.freeze()

    reg = _Registration(matcher)
    if isinstance(case_source, str):
        # Un str es iterable, pero casi seguro es un error del llamador
        raise TypeError("case_source must be a list of case names, not a single string")
    elif callable(case_source):
        case_source(reg.register)
    else:
        try:
            names = iter(case_source)
        except TypeError:
            raise TypeError(f"Unsupported case_source: {case_source!r}") from None
        for name in names:
            if name is None:
                raise TypeError("Anonymous cases can only be registered through a registration callback")
            reg.register(name)

    return reg.freeze()
