from __future__ import annotations
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING, Any, Callable, List, Optional
from typing_extensions import NotRequired, TypedDict # NotRequired no está en 'typing' para Python < 3.11

from kp_case_matcher.utils.logs import setup_logger_json

if TYPE_CHECKING:
    from kp_case_matcher.case_matcher.factory import DispatchFunction

LogFn = Callable[[str], None]  # ej. logger.debug

logger = setup_logger_json("DEBUG", "case_matcher.debug")


class DispatchTrace(TypedDict):
    """Campos `extra` de cada línea de debug."""
    path: str
    case: str
    time_ms: float
    arg_count: NotRequired[int]
    kwarg_names: NotRequired[List[str]]


@dataclass(frozen=True, eq=False)
class DebugDispatch:
    """
    Envuelve un DispatchFunction y reporta en cada llamada:
      - path lógico del dispatcher (p.ej. "sign.absolute_value")
      - caso elegido por el indexer
      - duración en ms del handler
      - cantidad de args posicionales y nombres de kwargs (opcional)
    El resultado del handler se devuelve sin tocar.
    """
    inner: DispatchFunction
    path: str
    log: Optional[LogFn] = None   # por defecto usa el logger JSON
    capture_args: bool = False

    @property
    def cases(self):
        return self.inner.cases

    def classify(self, value: Any):
        return self.inner.classify(value)

    def __call__(self, value: Any, *args: Any, **kwargs: Any) -> Any:
        case, handler = self.inner.resolve(value)

        t0 = perf_counter()
        res = handler(value, *args, **kwargs)
        dt_ms = (perf_counter() - t0) * 1000.0

        # Nota: nunca se loguean los valores, solo su forma.
        arity = (1 + len(args), sorted(kwargs)) if self.capture_args else None
        if self.log:
            self.log(
                f"[case-debug] path={self.path} case={case} time_ms={dt_ms:.3f}"
                + (f" args={arity[0]} kwargs={arity[1]}" if arity is not None else "")
            )
        else:
            extra: DispatchTrace = {
                "path": self.path,
                "case": str(case),
                "time_ms": dt_ms,
            }
            if arity is not None:
                extra["arg_count"] = arity[0]
                extra["kwarg_names"] = arity[1]
            logger.debug(f"dispatched {self.path} to case {case}", extra=extra)
        return res
