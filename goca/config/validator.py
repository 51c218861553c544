"""Constraint checks over a fully merged configuration.

Every constrained field is checked and one diagnostic is emitted per
violation; nothing short-circuits, so one run reports the complete defect
list.  Checks run in a fixed order (required fields, enums, numeric bounds,
advisory warnings) and, within each group, in table order, so the diagnostic
sequence is deterministic.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from goca.config.diagnostics import Diagnostic, ValidationReport
from goca.config.models import (
    AuthType,
    CacheType,
    CommentLanguage,
    CommentStyle,
    DatabaseType,
    DIType,
    FixtureFormat,
    GocaConfig,
    LogFormat,
    MockTool,
    NamingCase,
    TestFramework,
    ValidationLibrary,
    get_path,
    is_set,
)


REQUIRED_FIELDS: tuple[str, ...] = ("project.name", "project.module")

ENUM_FIELDS: dict[str, type[Enum]] = {
    "architecture.di.type": DIType,
    "architecture.naming.entities": NamingCase,
    "architecture.naming.fields": NamingCase,
    "architecture.naming.files": NamingCase,
    "architecture.naming.packages": NamingCase,
    "architecture.naming.constants": NamingCase,
    "architecture.naming.variables": NamingCase,
    "architecture.naming.functions": NamingCase,
    "database.type": DatabaseType,
    "generation.validation.library": ValidationLibrary,
    "generation.documentation.comments.language": CommentLanguage,
    "generation.documentation.comments.style": CommentStyle,
    "testing.framework": TestFramework,
    "testing.mocks.tool": MockTool,
    "testing.fixtures.format": FixtureFormat,
    "features.auth.type": AuthType,
    "features.cache.type": CacheType,
    "features.logging.format": LogFormat,
}

# Closed intervals; ``None`` means unbounded on that side.
NUMERIC_BOUNDS: dict[str, tuple[Optional[float], Optional[float]]] = {
    "database.port": (0, 65535),
    "database.connection.max_open": (0, None),
    "database.connection.max_idle": (0, None),
    "generation.style.line_length": (0, None),
    "generation.style.tab_width": (0, None),
    "testing.coverage.threshold": (0.0, 100.0),
}


def enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def is_valid_enum_value(value: str, enum_cls: type[Enum]) -> bool:
    """Exact, case-sensitive membership; the empty string is always legal."""
    return value == "" or value in enum_values(enum_cls)


def is_within_bounds(
    value: float, bounds: tuple[Optional[float], Optional[float]]
) -> bool:
    low, high = bounds
    # NaN fails both comparisons, so it is out of every range
    return (low is None or value >= low) and (high is None or value <= high)


def _describe_bounds(bounds: tuple[Optional[float], Optional[float]]) -> str:
    low, high = bounds
    if high is None:
        return f"must be >= {low}"
    if low is None:
        return f"must be <= {high}"
    return f"must be between {low} and {high}"


# ---------------------------------------------------------------------------
# Check groups
# ---------------------------------------------------------------------------

def check_required(config: GocaConfig) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for path in REQUIRED_FIELDS:
        value = get_path(config, path)
        if not str(value).strip():
            diagnostics.append(Diagnostic.error(path, f"{path} is required", value))
    return diagnostics


def check_enums(config: GocaConfig) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for path, enum_cls in ENUM_FIELDS.items():
        value = get_path(config, path)
        if not is_valid_enum_value(value, enum_cls):
            diagnostics.append(
                Diagnostic.error(
                    path,
                    f"invalid value '{value}'; must be one of: "
                    f"{', '.join(enum_values(enum_cls))}",
                    value,
                )
            )
    return diagnostics


def check_bounds(config: GocaConfig) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for path, bounds in NUMERIC_BOUNDS.items():
        value = get_path(config, path)
        if not is_within_bounds(value, bounds):
            diagnostics.append(
                Diagnostic.error(
                    path,
                    f"{value} is out of range; {_describe_bounds(bounds)}",
                    value,
                )
            )
    return diagnostics


def check_advisories(config: GocaConfig) -> list[Diagnostic]:
    """Non-fatal observations about an otherwise valid configuration."""
    diagnostics: list[Diagnostic] = []

    if not config.project.version:
        diagnostics.append(
            Diagnostic.warning(
                "project.version",
                "project version is empty; consider setting one (e.g. 1.0.0)",
                config.project.version,
            )
        )

    db = config.database
    if (
        db.type == DatabaseType.SQLITE.value
        and db.port != 0
        and is_set(config, "database.port")
    ):
        diagnostics.append(
            Diagnostic.warning(
                "database.port",
                "sqlite is file based; the port setting is ignored",
                db.port,
            )
        )

    return diagnostics


def validate_config(config: GocaConfig) -> ValidationReport:
    """Run every check against *config* and collect the diagnostics.

    The report fails (``report.ok is False``) iff at least one
    error-severity diagnostic was produced.
    """
    report = ValidationReport()
    report.extend(check_required(config))
    report.extend(check_enums(config))
    report.extend(check_bounds(config))
    report.extend(check_advisories(config))
    return report
