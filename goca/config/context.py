"""Invocation-scoped configuration context.

A :class:`ConfigContext` is created at the start of each command and owns the
whole resolution pipeline for that invocation:

    Loader -> Default Resolver -> Flag Merger (+ re-derivation) -> Validator

The resolved configuration is cached on the instance, never at module level,
and handed out only as a read-only :class:`~goca.config.view.ConfigView`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from goca.config.defaults import rederive, resolve_defaults
from goca.config.diagnostics import Diagnostic, ValidationReport
from goca.config.flags import UNSET, CLIFlags, merge_flags
from goca.config.loader import load_config
from goca.config.validator import validate_config
from goca.config.view import ConfigView


LAYERS: tuple[str, ...] = ("domain", "usecase", "repository", "handler")


class ResolvedConfig(BaseModel):
    """A validated configuration plus everything learned while resolving it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: ConfigView
    report: ValidationReport = Field(default_factory=ValidationReport)
    source_path: Optional[Path] = Field(
        default=None, description="Configuration file used, or None when none was found"
    )
    derived: dict[str, Any] = Field(
        default_factory=dict, description="Derived defaults applied, by dotted path"
    )

    @property
    def warnings(self) -> list[Diagnostic]:
        return self.report.warnings


class ConfigContext:
    """Resolves and serves the effective configuration for one invocation.

    Args:
        project_root: Directory searched for the configuration document.
        flags: Command-line flags supplied on this invocation.
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        flags: CLIFlags | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.flags = flags or CLIFlags()
        self._resolved: ResolvedConfig | None = None

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def resolve(self) -> ResolvedConfig:
        """Run the pipeline once and cache the result on this context.

        Raises:
            ConfigParseError: If the configuration document is malformed.
            ConfigValidationError: If any error diagnostic was produced.  It
                carries every diagnostic, resolver warnings included.
        """
        if self._resolved is not None:
            return self._resolved

        loaded = load_config(self.project_root)

        resolution = resolve_defaults(loaded.config)
        merged = merge_flags(resolution.config, self.flags)
        resolution = rederive(
            resolution.model_copy(update={"config": merged.config}),
            merged.changed,
        )

        report = ValidationReport()
        report.extend(resolution.warnings)
        report.extend(merged.diagnostics)
        report.extend(validate_config(resolution.config).diagnostics)
        report.raise_for_errors()

        self._resolved = ResolvedConfig(
            config=ConfigView(resolution.config),
            report=report,
            source_path=loaded.path,
            derived=resolution.derived,
        )
        return self._resolved

    @property
    def config(self) -> ConfigView:
        return self.resolve().config

    @property
    def report(self) -> ValidationReport:
        return self.resolve().report

    @property
    def warnings(self) -> list[Diagnostic]:
        return self.resolve().warnings

    @property
    def has_config_file(self) -> bool:
        """Whether a configuration document exists in the project root."""
        if self._resolved is not None:
            return self._resolved.source_path is not None
        return load_config(self.project_root).found

    # ------------------------------------------------------------------
    # Effective-value accessors (flag > file > default)
    # ------------------------------------------------------------------

    def get_effective(self, path: str, override: Any = UNSET) -> Any:
        """Value of *path*, unless a per-call *override* was provided."""
        if override is not UNSET:
            return override
        return self.config.get(path)

    def get_database_type(self, override: Any = UNSET) -> str:
        return self.get_effective("database.type", override)

    def get_validation_enabled(self, override: Any = UNSET) -> bool:
        return self.get_effective("generation.validation.enabled", override)

    def get_business_rules_enabled(self, override: Any = UNSET) -> bool:
        return self.get_effective("generation.business_rules.enabled", override)

    def get_naming_convention(self, kind: str, override: Any = UNSET) -> str:
        """Case style for an identifier class (``entities``, ``files`` ...)."""
        return self.get_effective(f"architecture.naming.{kind}", override)

    def get_layer_directory(self, layer: str) -> str:
        if layer not in LAYERS:
            raise ValueError(f"Unknown layer '{layer}'. Options: {', '.join(LAYERS)}")
        return self.config.get(f"architecture.layers.{layer}.directory")

    def is_layer_enabled(self, layer: str) -> bool:
        if layer not in LAYERS:
            raise ValueError(f"Unknown layer '{layer}'. Options: {', '.join(LAYERS)}")
        return self.config.get(f"architecture.layers.{layer}.enabled")

    def template_variables(self) -> dict[str, str]:
        """A mutable copy of ``templates.variables``."""
        return dict(self.config.templates.variables)


def resolve_config(
    project_root: str | Path = ".",
    flags: CLIFlags | None = None,
) -> ResolvedConfig:
    """One-shot helper: build a context and resolve it."""
    return ConfigContext(project_root, flags).resolve()
