"""Structured outcome of scaffolding operations and the CLI exit-code taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


class ErrorCode:
    """Error code identifiers carried by ``ScaffoldResult`` and ``ScaffoldError``."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNKNOWN_COMPONENT_TYPE = "UNKNOWN_COMPONENT_TYPE"
    DIRECTORY_EXISTS = "DIRECTORY_EXISTS"
    NOT_A_PLUGIN = "NOT_A_PLUGIN"
    NO_MULTI_MODULE_ROOT = "NO_MULTI_MODULE_ROOT"
    IO_ERROR = "IO_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"


class ExitCodes(IntEnum):
    """Process exit codes shared by every command."""

    SUCCESS = 0
    VALIDATION_ERROR = 1
    IO_ERROR = 2
    STATE_ERROR = 3


_EXIT_CODE_BY_ERROR: dict[str, ExitCodes] = {
    ErrorCode.INVALID_ARGUMENT: ExitCodes.VALIDATION_ERROR,
    ErrorCode.UNKNOWN_COMPONENT_TYPE: ExitCodes.VALIDATION_ERROR,
    ErrorCode.IO_ERROR: ExitCodes.IO_ERROR,
    ErrorCode.GENERATION_FAILED: ExitCodes.IO_ERROR,
    ErrorCode.DIRECTORY_EXISTS: ExitCodes.STATE_ERROR,
    ErrorCode.NOT_A_PLUGIN: ExitCodes.STATE_ERROR,
    ErrorCode.NO_MULTI_MODULE_ROOT: ExitCodes.STATE_ERROR,
}


def exit_code_for(error_code: str | None) -> ExitCodes:
    """Map an error code to its exit code; unknown codes are validation errors."""
    if error_code is None:
        return ExitCodes.SUCCESS
    return _EXIT_CODE_BY_ERROR.get(error_code, ExitCodes.VALIDATION_ERROR)


class ScaffoldError(Exception):
    """Failure raised inside generators, mutators and the renderer.

    Attributes:
        code: One of the ``ErrorCode`` identifiers.
        path: File or directory involved, if any.
    """

    code: str = ErrorCode.IO_ERROR

    def __init__(self, message: str, *, code: str | None = None, path: Path | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.path = path

    @property
    def message(self) -> str:
        text = str(self.args[0]) if self.args else ""
        if self.path is not None and str(self.path) not in text:
            return f"{text} ({self.path})"
        return text


class RenderError(ScaffoldError):
    """A template could not be rendered or its output could not be written."""

    code = ErrorCode.GENERATION_FAILED


@dataclass(frozen=True)
class ScaffoldResult:
    """Result returned by every public ``ScaffoldEngine`` operation."""

    success: bool
    error_code: str | None = None
    error_message: str | None = None
    created_path: Path | None = None

    @classmethod
    def ok(cls, created_path: Path | None = None) -> ScaffoldResult:
        return cls(success=True, created_path=created_path)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> ScaffoldResult:
        return cls(success=False, error_code=error_code, error_message=error_message)

    @classmethod
    def from_exception(cls, exc: ScaffoldError) -> ScaffoldResult:
        return cls.error(exc.code, exc.message)

    @property
    def exit_code(self) -> ExitCodes:
        return ExitCodes.SUCCESS if self.success else exit_code_for(self.error_code)
