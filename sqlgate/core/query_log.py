"""
Query log records sent to the logger injected into a Gate.

Each record is emitted with ``extra={"class", "function", "file", "line", "type"}``
so handlers and formatters can attribute a statement to the code that ran it.
"""

from __future__ import annotations

import logging
import pprint
import sys
from dataclasses import dataclass
from types import FrameType
from typing import Any, Mapping

from sqlgate.core.config import settings

_log = logging.getLogger(__name__)

_PACKAGE = __name__.split(".", 1)[0]


def _is_internal(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__", "")
    if module == _PACKAGE or module.startswith(_PACKAGE + "."):
        return True
    # methods of Gate subclasses defined outside the package
    from sqlgate.gate import Gate

    return isinstance(frame.f_locals.get("self"), Gate)


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Where a query came from: the class, function, file and line of the call site."""

    class_name: str = ""
    function: str = ""
    file: str = ""
    line: int | None = None

    @classmethod
    def capture(cls) -> CallerContext:
        """Describe the innermost stack frame that does not belong to this package."""
        frame: FrameType | None = sys._getframe(1)
        while frame is not None and _is_internal(frame):
            frame = frame.f_back
        if frame is None:
            return cls()
        owner = frame.f_locals.get("self", frame.f_locals.get("cls"))
        if owner is None:
            owner_name = ""
        elif isinstance(owner, type):
            owner_name = owner.__name__
        else:
            owner_name = type(owner).__name__
        return cls(
            class_name=owner_name,
            function=frame.f_code.co_name,
            file=frame.f_code.co_filename,
            line=frame.f_lineno,
        )

    def as_extra(self) -> dict[str, Any]:
        return {"class": self.class_name, "function": self.function, "file": self.file, "line": self.line}


def format_query(text: str, params: Mapping[Any, Any] | None = None, message: str = "") -> str:
    """Render the multi-line log message: query text, parameter dump, optional message."""
    parameters = "Parameters:\n" + pprint.pformat(dict(params)) if params else ""
    return f"Query:\n{text}\n{parameters}\n{message}"


class QueryLogger:
    """
    Best-effort writer of query log records.

    - logger: ``logging.Logger`` or anything with ``log(level, msg, *, extra=...)``;
      ``None`` turns every call into a no-op.
    - A logger that raises never interrupts the query; the failure goes to this
      module's own logger.
    """

    def __init__(self, logger: Any = None, *, log_type: str | None = None) -> None:
        self.logger = logger
        self.log_type = log_type or settings.QUERY_LOG_TYPE

    def log_query(
        self,
        text: str,
        params: Mapping[Any, Any] | None = None,
        *,
        caller: CallerContext | None = None,
        level: int = logging.INFO,
        message: str = "",
    ) -> None:
        if self.logger is None:
            return
        self._emit(level, format_query(text, params, message), caller)

    def log_error(self, message: str, *, caller: CallerContext | None = None) -> None:
        if self.logger is None:
            return
        self._emit(logging.ERROR, message, caller)

    def _emit(self, level: int, message: str, caller: CallerContext | None) -> None:
        try:
            ctx = caller or CallerContext.capture()
            extra = ctx.as_extra()
            extra["type"] = self.log_type
            self.logger.log(level, message, extra=extra)
        except Exception:
            _log.warning("Query logger failed; record dropped", exc_info=True)
