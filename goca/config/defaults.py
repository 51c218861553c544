"""Built-in defaults for the configuration model.

Resolution runs in two passes:

1. **Static** defaults from :data:`STATIC_DEFAULTS` fill every field the user
   left unset.  They are silent.
2. **Derived** defaults from :data:`DERIVED_RULES` are computed from other,
   already resolved fields (for example the database port from the database
   kind).  Each one that changes a value appends a warning naming the field and
   the chosen value.

A field counts as unset when it was never provided explicitly, or when it is an
empty string.  Defaults are assigned without marking the field as explicitly
set, so later rules can still tell user intent from built-in choices.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Callable, Iterable

from pydantic import BaseModel, Field

from goca.config.diagnostics import Diagnostic
from goca.config.models import (
    DEFAULT_DATABASE_PORTS,
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
    field_owner,
    get_path,
    is_set,
    set_path,
)
from goca.naming import to_snake_case


# ---------------------------------------------------------------------------
# Static defaults
# ---------------------------------------------------------------------------

STATIC_DEFAULTS: dict[str, Any] = {
    # project
    "project.version": "1.0.0",
    # architecture
    "architecture.layers.domain.enabled": True,
    "architecture.layers.domain.directory": "internal/domain",
    "architecture.layers.usecase.enabled": True,
    "architecture.layers.usecase.directory": "internal/usecase",
    "architecture.layers.repository.enabled": True,
    "architecture.layers.repository.directory": "internal/repository",
    "architecture.layers.handler.enabled": True,
    "architecture.layers.handler.directory": "internal/handler",
    "architecture.di.type": DIType.MANUAL.value,
    "architecture.naming.entities": NamingCase.PASCAL.value,
    "architecture.naming.fields": NamingCase.PASCAL.value,
    "architecture.naming.files": NamingCase.SNAKE.value,
    "architecture.naming.packages": NamingCase.LOWER.value,
    "architecture.naming.constants": NamingCase.UPPER.value,
    "architecture.naming.variables": NamingCase.CAMEL.value,
    "architecture.naming.functions": NamingCase.PASCAL.value,
    # database
    "database.type": DatabaseType.POSTGRES.value,
    "database.host": "localhost",
    "database.migrations.enabled": True,
    "database.migrations.directory": "migrations",
    "database.connection.max_open": 25,
    "database.connection.max_idle": 5,
    "database.connection.max_lifetime": "5m",
    "database.features.timestamps": True,
    # generation
    "generation.validation.enabled": True,
    "generation.validation.library": ValidationLibrary.BUILTIN.value,
    "generation.documentation.comments.enabled": True,
    "generation.documentation.comments.language": CommentLanguage.ENGLISH.value,
    "generation.documentation.comments.style": CommentStyle.GODOC.value,
    "generation.style.gofmt": True,
    "generation.style.goimports": True,
    "generation.style.line_length": 120,
    "generation.style.tab_width": 4,
    # testing
    "testing.enabled": True,
    "testing.framework": TestFramework.TESTIFY.value,
    "testing.coverage.enabled": True,
    "testing.coverage.threshold": 80.0,
    "testing.mocks.enabled": True,
    "testing.mocks.tool": MockTool.TESTIFY.value,
    "testing.mocks.directory": "internal/mocks",
    "testing.fixtures.format": FixtureFormat.JSON.value,
    # features
    "features.auth.type": AuthType.JWT.value,
    "features.cache.type": CacheType.REDIS.value,
    "features.logging.level": "info",
    "features.logging.format": LogFormat.JSON.value,
    # templates
    "templates.directory": ".goca/templates",
}


def _is_unset(config: GocaConfig, path: str) -> bool:
    return not is_set(config, path) or get_path(config, path) == ""


def _assign_default(config: GocaConfig, path: str, value: Any) -> None:
    """Assign *value* without recording the field as user-provided."""
    owner, leaf = field_owner(config, path)
    was_set = leaf in owner.model_fields_set
    setattr(owner, leaf, value)
    if not was_set:
        owner.model_fields_set.discard(leaf)


def _blank_value(config: GocaConfig, path: str) -> Any:
    owner, leaf = field_owner(config, path)
    return type(owner).model_fields[leaf].get_default(call_default_factory=True)


# ---------------------------------------------------------------------------
# Derived defaults
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DerivedRule:
    """A default computed from other resolved fields.

    ``applies`` decides whether the rule fires for a config; ``compute``
    returns the value to assign.  ``depends_on`` lists the fields whose change
    (for instance by a command-line flag) requires re-evaluating the rule.
    """

    target: str
    depends_on: tuple[str, ...]
    applies: Callable[[GocaConfig], bool]
    compute: Callable[[GocaConfig], Any]
    reason: str


def _port_applies(cfg: GocaConfig) -> bool:
    return cfg.database.port == 0 and cfg.database.type in DEFAULT_DATABASE_PORTS


DERIVED_RULES: tuple[DerivedRule, ...] = (
    DerivedRule(
        target="database.port",
        depends_on=("database.type",),
        applies=_port_applies,
        compute=lambda cfg: DEFAULT_DATABASE_PORTS[cfg.database.type],
        reason="default port for the database type",
    ),
    DerivedRule(
        target="database.connection.charset",
        depends_on=("database.type",),
        applies=lambda cfg: (
            cfg.database.type == DatabaseType.MYSQL.value
            and cfg.database.connection.charset == ""
        ),
        compute=lambda cfg: "utf8mb4",
        reason="MySQL connections default to utf8mb4",
    ),
    DerivedRule(
        target="database.name",
        depends_on=("project.name",),
        applies=lambda cfg: cfg.database.name == "" and cfg.project.name != "",
        compute=lambda cfg: to_snake_case(cfg.project.name),
        reason="database named after the project",
    ),
    DerivedRule(
        target="features.security.rate_limit",
        depends_on=("features.auth.enabled",),
        applies=lambda cfg: (
            cfg.features.auth.enabled
            and not is_set(cfg, "features.security.rate_limit")
        ),
        compute=lambda cfg: True,
        reason="rate limiting is enabled automatically with authentication",
    ),
    DerivedRule(
        target="generation.documentation.swagger.title",
        depends_on=("generation.documentation.swagger.enabled", "project.name"),
        applies=lambda cfg: (
            cfg.generation.documentation.swagger.enabled
            and cfg.generation.documentation.swagger.title == ""
            and cfg.project.name != ""
        ),
        compute=lambda cfg: f"{cfg.project.name} API",
        reason="API documentation titled after the project",
    ),
)


def _derived_warning(rule: DerivedRule, value: Any) -> Diagnostic:
    return Diagnostic.warning(
        rule.target,
        f"{rule.target} not set; using {value!r} ({rule.reason})",
        value,
    )


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class Resolution(BaseModel):
    """Output of :func:`resolve_defaults`.

    ``derived`` maps each derived field to the value chosen for it.
    """

    config: GocaConfig
    warnings: list[Diagnostic] = Field(default_factory=list)
    derived: dict[str, Any] = Field(default_factory=dict)


def apply_static_defaults(config: GocaConfig) -> None:
    """Fill unset fields of *config* in place.  Never produces warnings."""
    for path, value in STATIC_DEFAULTS.items():
        if _is_unset(config, path):
            _assign_default(config, path, value)


def _apply_rule(
    config: GocaConfig, rule: DerivedRule
) -> tuple[bool, Any]:
    if not rule.applies(config):
        return False, None
    value = rule.compute(config)
    if get_path(config, rule.target) == value:
        return False, None
    _assign_default(config, rule.target, value)
    return True, value


def resolve_defaults(
    config: GocaConfig,
    rules: Iterable[DerivedRule] = DERIVED_RULES,
) -> Resolution:
    """Return a copy of *config* with static, then derived, defaults applied.

    The input is never mutated, so resolving the same model twice yields
    identical configurations and identical warnings.
    """
    resolved = config.model_copy(deep=True)
    apply_static_defaults(resolved)

    warnings: list[Diagnostic] = []
    derived: dict[str, Any] = {}
    for rule in rules:
        changed, value = _apply_rule(resolved, rule)
        if changed:
            derived[rule.target] = value
            warnings.append(_derived_warning(rule, value))

    return Resolution(config=resolved, warnings=warnings, derived=derived)


def rederive(
    resolution: Resolution,
    changed_paths: Iterable[str],
    rules: Iterable[DerivedRule] = DERIVED_RULES,
) -> Resolution:
    """Re-evaluate derived defaults after *changed_paths* were overridden.

    A rule is re-run when one of its dependencies changed and its target was
    not itself overridden.  A previously derived target is first reset to its
    blank value, so it follows the new dependency (or disappears when the rule
    no longer applies).  Explicit user values are left alone.
    """
    changed = set(changed_paths)
    config = resolution.config.model_copy(deep=True)
    # Overridden targets are no longer derived.
    derived = {k: v for k, v in resolution.derived.items() if k not in changed}
    warnings = [w for w in resolution.warnings if w.field not in changed]

    for rule in rules:
        if rule.target in changed or not changed.intersection(rule.depends_on):
            continue
        if rule.target in derived:
            _assign_default(config, rule.target, _blank_value(config, rule.target))
            del derived[rule.target]
            warnings = [w for w in warnings if w.field != rule.target]
        elif is_set(config, rule.target):
            continue

        applied, value = _apply_rule(config, rule)
        if applied:
            derived[rule.target] = value
            warnings.append(_derived_warning(rule, value))

    return Resolution(config=config, warnings=warnings, derived=derived)


def create_default_config(project: str, module: str = "") -> GocaConfig:
    """A fully defaulted configuration named after *project*.

    *project* may be a bare name or a path; only its final component is used.
    The module path falls back to the project name.
    """
    name = PurePath(project).name or project
    config = GocaConfig()
    set_path(config, "project.name", name)
    set_path(config, "project.module", module or name)
    return resolve_defaults(config).config
