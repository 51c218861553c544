"""Validation diagnostics.

Diagnostics are accumulated rather than raised: every stage of the pipeline
appends to a :class:`ValidationReport` and the aggregate pass/fail signal is
derived from the severities it contains.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, computed_field

from goca.errors import ConfigValidationError


class Severity(str, Enum):
    """How a diagnostic affects the invocation."""
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A single field-level finding."""

    field: str = Field(..., description="Dotted path, e.g. 'database.port'")
    message: str = Field(..., description="Human-readable explanation")
    value: Any = Field(default=None, description="The offending (or chosen) value")
    severity: Severity = Field(default=Severity.ERROR)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @classmethod
    def error(cls, field: str, message: str, value: Any = None) -> "Diagnostic":
        return cls(field=field, message=message, value=value, severity=Severity.ERROR)

    @classmethod
    def warning(cls, field: str, message: str, value: Any = None) -> "Diagnostic":
        return cls(field=field, message=message, value=value, severity=Severity.WARNING)

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.field}: {self.message}"


class ValidationReport(BaseModel):
    """Ordered list of diagnostics plus the aggregate verdict."""

    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def ok(self) -> bool:
        """True when no error-severity diagnostic was recorded."""
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def error(self) -> Optional[ConfigValidationError]:
        """The aggregate error, or ``None`` when validation passed.

        Warnings alone never produce an aggregate error.
        """
        if self.ok:
            return None
        return ConfigValidationError(self.diagnostics)

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)

    def fields(self, severity: Severity | None = None) -> list[str]:
        """Dotted paths of the recorded diagnostics, optionally filtered."""
        return [
            d.field
            for d in self.diagnostics
            if severity is None or d.severity is severity
        ]

    def raise_for_errors(self) -> None:
        error = self.error
        if error is not None:
            raise error
