from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    MALFORMED_HEADER = "malformed_header"
    CONTAINER_OPEN_FAILURE = "container_open_failure"
    EMULATOR_OPEN_FAILURE = "emulator_open_failure"


class AnalysisError(RuntimeError):
    """
    Raised when a file cannot be analyzed at all.
    Nothing from the failed attempt is published; callers just report it.
    """
    kind: ErrorKind = ErrorKind.CONTAINER_OPEN_FAILURE

    def __init__(
        self,
        message: str,
        source: Optional[Path] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.context: Dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source is not None:
            msg = f"{msg} ({self.source})"
        return msg


class MalformedHeader(AnalysisError):
    kind = ErrorKind.MALFORMED_HEADER

    @classmethod
    def field_mismatch(cls, field: str, expected: Any, actual: Any, source: Optional[Path] = None) -> "MalformedHeader":
        return cls(
            f"Unsupported WAV header: {field} is {actual}, expected {expected}",
            source=source,
            context={"field": field, "expected": expected, "actual": actual},
        )


class ContainerOpenFailure(AnalysisError):
    kind = ErrorKind.CONTAINER_OPEN_FAILURE


class EmulatorOpenFailure(AnalysisError):
    kind = ErrorKind.EMULATOR_OPEN_FAILURE
