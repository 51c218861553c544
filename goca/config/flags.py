"""Command-line flag overlay.

Only flags the user actually supplied take part in the merge.  Presence is
carried explicitly by the :data:`UNSET` sentinel, so a flag passed as ``""``,
``False`` or ``0`` still overrides the file and the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from goca.config.diagnostics import Diagnostic
from goca.config.models import GocaConfig, set_path


class _Unset:
    """Marker for a flag that was not passed on this invocation."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: dict) -> "_Unset":
        return self


UNSET: Any = _Unset()


# Flag name -> dotted configuration path it overrides.
FLAG_TARGETS: dict[str, str] = {
    "database": "database.type",
    "module": "project.module",
    "name": "project.name",
    "auth": "features.auth.enabled",
    "auth_type": "features.auth.type",
    "cache": "features.cache.enabled",
    "cache_type": "features.cache.type",
    "validation": "generation.validation.enabled",
    "business_rules": "generation.business_rules.enabled",
    "timestamps": "database.features.timestamps",
    "soft_delete": "database.features.soft_delete",
    "uuid": "database.features.uuid",
    "di": "architecture.di.type",
    "test_framework": "testing.framework",
    "coverage_threshold": "testing.coverage.threshold",
    "port": "database.port",
    "swagger": "generation.documentation.swagger.enabled",
    "template_dir": "templates.directory",
}


@dataclass(frozen=True)
class CLIFlags:
    """Flag values for one invocation; every field defaults to :data:`UNSET`."""

    database: Any = UNSET
    module: Any = UNSET
    name: Any = UNSET
    auth: Any = UNSET
    auth_type: Any = UNSET
    cache: Any = UNSET
    cache_type: Any = UNSET
    validation: Any = UNSET
    business_rules: Any = UNSET
    timestamps: Any = UNSET
    soft_delete: Any = UNSET
    uuid: Any = UNSET
    di: Any = UNSET
    test_framework: Any = UNSET
    coverage_threshold: Any = UNSET
    port: Any = UNSET
    swagger: Any = UNSET
    template_dir: Any = UNSET

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CLIFlags":
        """Build flags from ``{"soft-delete": True, ...}``.

        Every key present counts as provided, whatever its value.  Hyphenated
        spellings are accepted.

        Raises:
            KeyError: If a key does not name a known flag.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            attr = key.replace("-", "_")
            if attr not in known:
                raise KeyError(f"Unknown flag '{key}'")
            kwargs[attr] = value
        return cls(**kwargs)

    def provided(self) -> dict[str, Any]:
        """The flags that were actually passed, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_provided(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


class MergeResult(BaseModel):
    """Output of :func:`merge_flags`: the overlaid copy and the paths it changed."""

    config: GocaConfig
    changed: list[str] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(
        default_factory=list, description="Flags whose value has the wrong type"
    )


def merge_flags(config: GocaConfig, flags: CLIFlags | None) -> MergeResult:
    """Overlay every provided flag onto a copy of *config*.

    Overridden fields are marked as explicitly set.  Values are type-checked
    by the model: a flag such as ``port="abc"`` leaves its target untouched
    and is reported as an error diagnostic on the target path.
    """
    merged = config.model_copy(deep=True)
    if flags is None:
        return MergeResult(config=merged)

    changed: list[str] = []
    diagnostics: list[Diagnostic] = []
    for flag, value in flags.provided().items():
        path = FLAG_TARGETS[flag]
        try:
            set_path(merged, path, value)
        except ValidationError as exc:
            option = "--" + flag.replace("_", "-")
            reason = exc.errors()[0]["msg"]
            diagnostics.append(
                Diagnostic.error(path, f"Invalid value for {option}: {reason}", value)
            )
            continue
        changed.append(path)
    return MergeResult(config=merged, changed=changed, diagnostics=diagnostics)
