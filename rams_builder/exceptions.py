from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from rams_builder.schemas.base import Violation
    from rams_builder.wizard import WizardStep


class RamsBuilderError(Exception):
    """Base exception with user-friendly message."""
    pass


class ConfigError(RamsBuilderError):
    pass


class ValidationFailure(RamsBuilderError):
    """One or more field-level rule violations."""

    def __init__(self, violations: List[Violation]) -> None:
        self.violations = list(violations)
        lines = [f"{v.field}: {v.message}" for v in self.violations]
        noun = "violation" if len(lines) == 1 else "violations"
        super().__init__(f"{len(lines)} validation {noun}: " + "; ".join(lines))


class WorkflowGateFailure(RamsBuilderError):
    def __init__(self, message: str, step: Optional[WizardStep] = None) -> None:
        super().__init__(message)
        self.step = step


class CollaboratorFailure(RamsBuilderError):
    pass


class StorageError(CollaboratorFailure):
    pass


class AuthenticationError(CollaboratorFailure):
    pass


class RenderError(CollaboratorFailure):
    pass
