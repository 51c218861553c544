"""Exception hierarchy for the goca engine.

Every failure mode the engine can produce has its own exception type so that
callers (typically the CLI front-end) can decide how to present it and whether
to halt, without parsing messages.  Validation *warnings* are never raised;
they travel as :class:`~goca.config.diagnostics.Diagnostic` objects.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from goca.config.diagnostics import Diagnostic


class GocaError(Exception):
    """Base class for all goca errors."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigParseError(GocaError):
    """The configuration document exists but could not be parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid configuration file {self.path}: {reason}")


class ConfigValidationError(GocaError):
    """One or more error-severity diagnostics were produced.

    Carries the complete, ordered list of diagnostics (warnings included) so
    that a single invocation can surface every defect at once.
    """

    def __init__(self, diagnostics: Iterable["Diagnostic"]) -> None:
        self.diagnostics = list(diagnostics)
        self.errors = [d for d in self.diagnostics if d.is_error]
        fields = ", ".join(d.field for d in self.errors)
        super().__init__(
            f"Configuration has {len(self.errors)} error(s): {fields}"
        )


class PresetNotFoundError(GocaError):
    """An unknown configuration preset name was requested."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = sorted(available)
        super().__init__(
            f"Preset '{name}' not found. Available: {', '.join(self.available)}"
        )


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateRenderError(GocaError):
    """A template failed to compile or execute."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to render template {name}: {reason}")


class TemplateNotFoundError(TemplateRenderError):
    """No user or built-in template exists under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, "template not found")


# ---------------------------------------------------------------------------
# File safety
# ---------------------------------------------------------------------------


class FileConflictError(GocaError):
    """The target file already exists and force mode is off."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"File already exists: {self.path} "
            "(use --force to overwrite or --backup to backup first)"
        )


class BackupError(GocaError):
    """Backing up an existing file failed; the original was not touched."""

    def __init__(self, path: str | Path, backup_path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.backup_path = Path(backup_path)
        self.reason = reason
        super().__init__(
            f"Failed to backup {self.path} to {self.backup_path}: {reason}"
        )


class FileWriteError(GocaError):
    """Writing generated content to disk failed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write file {self.path}: {reason}")


# ---------------------------------------------------------------------------
# Constructs
# ---------------------------------------------------------------------------


class NameConflictError(GocaError):
    """A construct with the same name (ignoring case) already exists."""

    def __init__(self, name: str, existing: str) -> None:
        self.name = name
        self.existing = existing
        super().__init__(f"Entity '{name}' already exists in the project")


class FieldSpecError(GocaError, ValueError):
    """A ``name:type`` field specification is malformed."""
