# Concatenated into the single-file scripts by build.py (see MODULE_ORDER)

# =============================================================================
# Error Handling Types (Result + ErrorReport)
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class ErrorType(Enum):
    SESSION_NOT_FOUND = "session_not_found"
    PANE_VANISHED = "pane_vanished"
    TMUX_UNAVAILABLE = "tmux_unavailable"
    COMMAND_FAILED = "command_failed"
    TIMEOUT_ERROR = "timeout_error"
    PARSE_ERROR = "parse_error"
    FILE_NOT_FOUND = "file_not_found"


@dataclass
class Error:
    error_type: ErrorType
    message: str
    context: dict = field(default_factory=dict)
    original_exception: Exception = None


@dataclass
class Result(Generic[T]):
    success: bool
    value: T = None
    error: Error = None

    @staticmethod
    def ok(value: T) -> "Result[T]":
        return Result(success=True, value=value)

    @staticmethod
    def err(error: Error) -> "Result[T]":
        return Result(success=False, error=error)

    def is_ok(self) -> bool:
        return self.success

    def is_err(self) -> bool:
        return not self.success

    def value_or(self, default: T) -> T:
        """Return the value on success, ``default`` otherwise."""
        return self.value if self.success else default


@dataclass
class ErrorReport:
    errors: list[Error] = field(default_factory=list)
    warnings: list[Error] = field(default_factory=list)

    def add_error(self, error: Error):
        self.errors.append(error)
        # Messages may contain braces (tmux stderr, session names): never format them
        logger.bind(
            operation="error_report",
            status="error",
            error_type=error.error_type.value,
            **error.context
        ).error(error.message)

    def add_warning(self, error: Error):
        self.warnings.append(error)
        logger.bind(
            operation="error_report",
            status="warning",
            error_type=error.error_type.value,
            **error.context
        ).warning(error.message)

    def collect_result(self, result: Result, as_warning: bool = True) -> bool:
        """Collect the error from a failed Result; True when it succeeded.

        Preview failures degrade the output instead of aborting, so they are
        recorded as warnings unless ``as_warning`` is False.
        """
        if result.is_err():
            if as_warning:
                self.add_warning(result.error)
            else:
                self.add_error(result.error)
            return False
        return True

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def log_summary(self, op_trace_id: str):
        """Log the final error/warning counts for one run."""
        logger.info(
            "Operation complete",
            operation="error_report",
            status="complete",
            trace_id=op_trace_id,
            metrics={
                "total_errors": len(self.errors),
                "total_warnings": len(self.warnings)
            }
        )
