"""Configuration document discovery and parsing.

The loader only finds and parses; it never merges defaults or flags.  A
missing document is a normal outcome, a malformed one is a
:class:`~goca.errors.ConfigParseError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from goca.config.models import GocaConfig
from goca.errors import ConfigParseError


# Discovery order, highest priority first.
CONFIG_FILENAMES: tuple[str, ...] = (
    ".goca.yaml",
    ".goca.yml",
    "goca.yaml",
    "goca.yml",
)

DEFAULT_CONFIG_FILENAME = CONFIG_FILENAMES[0]


class LoadResult(BaseModel):
    """Outcome of :func:`load_config`.

    ``path`` is ``None`` when no document was found; ``config`` is then an
    empty model for the downstream stages to fill.
    """

    config: GocaConfig = Field(default_factory=GocaConfig)
    path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.path is not None


def find_config_file(directory: str | Path) -> Optional[Path]:
    """Return the highest-priority configuration file in *directory*, if any."""
    base = Path(directory)
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def parse_config_text(text: str, source: str | Path = "<string>") -> GocaConfig:
    """Parse a YAML document into a (partially populated) :class:`GocaConfig`.

    Raises:
        ConfigParseError: On YAML syntax errors, a non-mapping root, or values
            whose type does not match the model (e.g. ``port: abc``).
    """
    try:
        raw: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigParseError(source, f"invalid YAML: {exc}") from exc

    if raw is None:
        return GocaConfig()
    if not isinstance(raw, dict):
        raise ConfigParseError(
            source, f"expected a mapping at the document root, got {type(raw).__name__}"
        )

    try:
        return GocaConfig.model_validate(_drop_nulls(raw))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigParseError(source, problems) from exc


def _drop_nulls(value: Any) -> Any:
    """Treat ``key:`` with no value as if the key were absent."""
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value]
    return value


def load_config_file(path: str | Path) -> GocaConfig:
    """Read and parse a single configuration file."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigParseError(file_path, f"cannot read file: {exc}") from exc
    return parse_config_text(text, source=file_path)


def load_config(directory: str | Path) -> LoadResult:
    """Discover and parse the project configuration in *directory*."""
    path = find_config_file(directory)
    if path is None:
        return LoadResult()
    return LoadResult(config=load_config_file(path), path=path)


def dump_config_text(config: GocaConfig) -> str:
    """Serialise *config* as a YAML document, in model field order."""
    return yaml.safe_dump(
        config.model_dump(mode="json"),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def save_config(config: GocaConfig, path: str | Path) -> Path:
    """Write *config* to *path*, creating parent directories as needed.

    This is the explicit save used by project initialisation; generation
    commands never persist the configuration.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(dump_config_text(config), encoding="utf-8")
    return file_path
