# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error handling for SkillRouter.

This module provides error codes and exception classes shared by the rule
table loader, the outcome router and the debt recorder. It is the single
source of truth for error handling across all skillrouter modules.

Only configuration problems are fatal. Input anomalies and no-match results
are never raised to the caller of ``Dispatcher.dispatch``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class EnumCoreErrorCode(str, Enum):
    """Core error codes for SkillRouter operations."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Chain resolution errors
    OPERATION_FAILED = "OPERATION_FAILED"

    # File/IO errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    IO_ERROR = "IO_ERROR"


class SkillRouterError(Exception):
    """Base exception class for SkillRouter operations.

    Attributes:
        code: Error code from EnumCoreErrorCode
        message: Human-readable error message
        details: Additional error context and details
    """

    def __init__(
        self,
        code: EnumCoreErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code}, message={self.message}, "
            f"details={self.details})"
        )


class RuleTableValidationError(SkillRouterError):
    """Raised when a rule table fails whole-table validation.

    Every problem found in the validation pass is collected in ``problems``
    so the operator sees all of them at once instead of one per restart.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        message = "Rule table validation failed:\n" + "\n".join(
            f"  - {p}" for p in self.problems
        )
        super().__init__(
            EnumCoreErrorCode.CONFIGURATION_ERROR,
            message,
            details={"problems": self.problems},
        )


class ChainResolutionError(SkillRouterError):
    """Raised when an outcome cannot be resolved against a chain directive."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(EnumCoreErrorCode.OPERATION_FAILED, message, details)


class DebtRecordError(SkillRouterError):
    """Raised when a debt artifact cannot be written."""

    def __init__(self, message: str, path: str, cause: Exception | None = None) -> None:
        super().__init__(EnumCoreErrorCode.IO_ERROR, message, {"path": path})
        self.path = path
        self.cause = cause


__all__ = [
    "ChainResolutionError",
    "DebtRecordError",
    "EnumCoreErrorCode",
    "RuleTableValidationError",
    "SkillRouterError",
]
