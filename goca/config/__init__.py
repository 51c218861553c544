"""Configuration resolution for goca.

Loads the project configuration document, fills built-in and derived
defaults, overlays command-line flags and validates the result.

Key classes:
    ConfigContext     - Invocation-scoped resolution pipeline
    GocaConfig        - Pydantic model of the configuration document
    CLIFlags          - Flags supplied on one invocation (UNSET when absent)
    ValidationReport  - Ordered diagnostics plus the pass/fail verdict
    ConfigView        - Read-only view handed to later stages
"""

from goca.config.context import ConfigContext, ResolvedConfig, resolve_config
from goca.config.defaults import (
    DERIVED_RULES,
    STATIC_DEFAULTS,
    DerivedRule,
    Resolution,
    create_default_config,
    rederive,
    resolve_defaults,
)
from goca.config.diagnostics import Diagnostic, Severity, ValidationReport
from goca.config.flags import FLAG_TARGETS, UNSET, CLIFlags, MergeResult, merge_flags
from goca.config.loader import (
    CONFIG_FILENAMES,
    LoadResult,
    dump_config_text,
    find_config_file,
    load_config,
    load_config_file,
    parse_config_text,
    save_config,
)
from goca.config.models import GocaConfig, get_path, is_set, set_path
from goca.config.validator import validate_config
from goca.config.view import ConfigView
from goca.config.presets import (
    PRESETS,
    Preset,
    build_initial_config,
    get_preset,
    init_config_file,
    preset_names,
)

__all__ = [
    # Pipeline
    "ConfigContext",
    "ResolvedConfig",
    "resolve_config",
    # Model
    "GocaConfig",
    "ConfigView",
    "get_path",
    "set_path",
    "is_set",
    # Loader
    "CONFIG_FILENAMES",
    "LoadResult",
    "find_config_file",
    "load_config",
    "load_config_file",
    "parse_config_text",
    "dump_config_text",
    "save_config",
    # Defaults
    "STATIC_DEFAULTS",
    "DERIVED_RULES",
    "DerivedRule",
    "Resolution",
    "resolve_defaults",
    "rederive",
    "create_default_config",
    # Flags
    "UNSET",
    "CLIFlags",
    "FLAG_TARGETS",
    "MergeResult",
    "merge_flags",
    # Validation
    "Diagnostic",
    "Severity",
    "ValidationReport",
    "validate_config",
    # Presets
    "PRESETS",
    "Preset",
    "preset_names",
    "get_preset",
    "build_initial_config",
    "init_config_file",
]
