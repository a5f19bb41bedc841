from __future__ import annotations
from dataclasses import dataclass
from time import perf_counter
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import logging

from kp_case_matcher.case_matcher.debug import DebugDispatch, LogFn
from kp_case_matcher.case_matcher.dtos import CaseVocabularyDTO, MatcherDescriptionDTO
from kp_case_matcher.case_matcher.registry import Case, CaseLookup, CaseRegistry, CaseSource, build_registry
from kp_case_matcher.case_matcher.utils import set_difference
from kp_case_matcher.utils.errors import (
    CaseCoverageError,
    CaseMatcherException,
    DuplicateCaseError,
    ExtraneousCasesError,
    MissingCasesError,
    UndeclaredCaseReferenced,
    UnknownCaseAtDispatch,
)

logger = logging.getLogger(__name__)

Indexer = Callable[[Any], Any]            # value -> Case (o nombre registrado)
Handler = Callable[..., Any]              # (value, *args, **kwargs) -> result
HandlerTable = Mapping[Any, Handler]
MakeIndexer = Callable[[CaseLookup], Indexer]
MakeHandlerTable = Callable[[CaseLookup], HandlerTable]

# Errores que try_build() convierte en DispatchErr
_BUILD_ERRORS = (CaseCoverageError, UndeclaredCaseReferenced, DuplicateCaseError)


# --------------------------------------------------------------------
# Dispatcher final
# --------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class DispatchFunction:
    """
    Función generada: clasifica `value` con el indexer y delega en el
    handler del caso con exactamente los mismos argumentos.
    No envuelve ni aplica parcialmente al handler: un handler currificado
    devuelve su función interna tal cual.
    """
    indexer: Indexer
    registry: CaseRegistry
    handlers: Mapping[Case, Handler]
    name: Optional[str] = None

    @property
    def cases(self) -> Tuple[Case, ...]:
        return self.registry.cases

    def classify(self, value: Any) -> Case:
        produced = self.indexer(value)
        case = self.registry.coerce(produced)
        try:
            known = case in self.handlers
        except TypeError:  # el indexer devolvió algo no hasheable
            known = False
        if not known:
            raise UnknownCaseAtDispatch(produced, matcher=self.name)
        return case

    def resolve(self, value: Any) -> Tuple[Case, Handler]:
        case = self.classify(value)
        return case, self.handlers[case]

    def __call__(self, value: Any, *args: Any, **kwargs: Any) -> Any:
        return self.handlers[self.classify(value)](value, *args, **kwargs)


Dispatcher = Union[DispatchFunction, DebugDispatch]


# --------------------------------------------------------------------
# Resultado explícito de construcción (alternativa a las excepciones)
# --------------------------------------------------------------------

@dataclass(frozen=True)
class DispatchOk:
    dispatch: Dispatcher

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Dispatcher:
        return self.dispatch


@dataclass(frozen=True)
class DispatchErr:
    error: CaseMatcherException

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Dispatcher:
        raise self.error


BuildResult = Union[DispatchOk, DispatchErr]


# --------------------------------------------------------------------
# Matcher (factory de segunda etapa)
# --------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class CaseMatcher:
    """
    Vocabulario + indexer ya construidos. Cada llamada con un
    `make_handler_table` valida cobertura y devuelve un dispatcher nuevo;
    el registro y el indexer se comparten entre todos ellos.
    """
    registry: CaseRegistry
    indexer: Indexer
    name: Optional[str] = None
    debug: bool = False
    log: Optional[LogFn] = None

    @property
    def lookup(self) -> CaseLookup:
        return CaseLookup(self.registry)

    @property
    def cases(self) -> Tuple[Case, ...]:
        return self.registry.cases

    def classify(self, value: Any) -> Case:
        produced = self.indexer(value)
        case = self.registry.coerce(produced)
        if not isinstance(case, Case) or case not in self.registry.cases:
            raise UnknownCaseAtDispatch(produced, matcher=self.name)
        return case

    def describe(self) -> MatcherDescriptionDTO:
        return MatcherDescriptionDTO(
            name=self.name,
            cases=[str(c) for c in self.cases],
            has_default=self.registry.has_default,
            total_cases=len(self.registry),
        )

    def __call__(
        self,
        make_handler_table: MakeHandlerTable,
        *,
        debug: Optional[bool] = None,
        log: Optional[LogFn] = None,
        capture_args: bool = False,
        path: Optional[str] = None,
    ) -> Dispatcher:
        """
        Construye el dispatcher validando la handler table.

        Pasos:
        1) make_handler_table(lookup) -> mapping Case -> handler
        2) calcula casos extra y faltantes (siempre ambos)
        3) faltantes -> MissingCasesError; extra -> ExtraneousCasesError
        4) handlers no invocables -> TypeError
        5) congela la tabla y devuelve el DispatchFunction

        Args:
            make_handler_table: recibe el CaseLookup y devuelve la tabla.
            debug: si True, envuelve el resultado en DebugDispatch
                (por defecto hereda el `debug` del matcher).
            log: función de log para compilación y DebugDispatch.
            capture_args: si True, DebugDispatch reporta la forma de los args.
            path: etiqueta del dispatcher en los logs de debug.

        Raises:
            UndeclaredCaseReferenced, MissingCasesError, ExtraneousCasesError,
            DuplicateCaseError, TypeError.
        """
        t0 = perf_counter()
        log = log if log is not None else self.log
        debug = self.debug if debug is None else debug

        handlers = self._compile_table(make_handler_table)
        dispatch = DispatchFunction(
            indexer=self.indexer,
            registry=self.registry,
            handlers=handlers,
            name=self.name,
        )
        compiled_ms = (perf_counter() - t0) * 1000.0

        if log:
            log(f"[case-matcher] compiled matcher={self.name} cases={len(handlers)} "
                f"compile_ms={compiled_ms:.3f}")
        else:
            logger.debug("dispatcher compiled", extra={"matcher": self.name, "total_cases": len(handlers), "compiled_ms": compiled_ms})

        if debug:
            label = path or f"{self.name or 'matcher'}.{getattr(make_handler_table, '__name__', 'handlers')}"
            return DebugDispatch(dispatch, label, log, capture_args)
        return dispatch

    def try_build(self, make_handler_table: MakeHandlerTable, **options: Any) -> BuildResult:
        """Igual que llamar al matcher, pero los errores de cobertura vuelven como DispatchErr."""
        try:
            return DispatchOk(self(make_handler_table, **options))
        except _BUILD_ERRORS as ex:
            return DispatchErr(ex)

    def _compile_table(self, make_handler_table: MakeHandlerTable) -> Mapping[Case, Handler]:
        raw = make_handler_table(self.lookup)
        if not isinstance(raw, Mapping):
            raise TypeError(f"make_handler_table must return a mapping, got {type(raw).__name__}")

        # Normaliza keys str -> Case; lo desconocido queda tal cual (se reporta como extra)
        table: Dict[Any, Handler] = {}
        for key, handler in raw.items():
            case = self.registry.coerce(key)
            if case in table:
                raise DuplicateCaseError(case, matcher=self.name)
            table[case] = handler

        registered = list(self.registry.cases)
        keys = list(table)
        extraneous = set_difference(keys, registered)
        missing = set_difference(registered, keys)

        if missing:
            logger.warning("handler table is missing cases", extra={"matcher": self.name, "missing": [str(c) for c in missing]})
            raise MissingCasesError(missing, matcher=self.name)

        if extraneous:
            logger.warning("handler table has unregistered cases", extra={"matcher": self.name, "extraneous": [str(c) for c in extraneous]})
            raise ExtraneousCasesError(extraneous, matcher=self.name)

        not_callable = [str(c) for c, h in table.items() if not callable(h)]
        if not_callable:
            raise TypeError(f"Handlers must be callable, got non-callables for cases: {not_callable}")

        return MappingProxyType(table)


# --------------------------------------------------------------------
# Factory de primera etapa
# --------------------------------------------------------------------

def create_matcher(
    case_source: Union[CaseSource, CaseVocabularyDTO],
    make_indexer: MakeIndexer,
    *,
    name: Optional[str] = None,
    debug: bool = False,
    log: Optional[LogFn] = None,
) -> CaseMatcher:
    """
    Registra el vocabulario de casos y construye el indexer.

        sign = create_matcher(
            ["positive", "negative", "zero"],
            lambda cases: lambda n: cases("positive") if n > 0
                                    else cases("negative") if n < 0
                                    else cases("zero"))

        absolute = sign(lambda cases: {
            cases("positive"): lambda n: n,
            cases("negative"): lambda n: -n,
            cases("zero"): lambda n: 0,
        })

    `case_source` puede ser una lista de nombres, una subclase de Enum,
    un CaseVocabularyDTO o un callback `register -> None` (register() sin
    argumentos registra el caso default).
    """
    if isinstance(case_source, CaseVocabularyDTO):
        name = name if name is not None else case_source.name
        case_source = case_source.register_into

    registry = build_registry(case_source, matcher=name)
    indexer = make_indexer(CaseLookup(registry))
    if not callable(indexer):
        raise TypeError(f"make_indexer must return a callable, got {type(indexer).__name__}")

    logger.debug("matcher created", extra={"matcher": name, "total_cases": len(registry), "has_default": registry.has_default})

    return CaseMatcher(registry=registry, indexer=indexer, name=name, debug=debug, log=log)
