"""Named starting configurations for new projects.

A preset is a partial configuration document; anything it leaves out is
filled by the default resolver.  :func:`init_config_file` is the one
operation that persists a configuration document, and it writes through the
safety coordinator so dry-run, force and backup apply.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from goca.config.defaults import rederive, resolve_defaults
from goca.config.diagnostics import ValidationReport
from goca.config.flags import CLIFlags, merge_flags
from goca.config.loader import DEFAULT_CONFIG_FILENAME, dump_config_text
from goca.config.models import GocaConfig, set_path
from goca.config.validator import validate_config
from goca.errors import PresetNotFoundError
from goca.scaffolder.safety import SafetyCoordinator, WriteRecord


class Preset(BaseModel):
    """A named partial configuration document."""

    name: str
    title: str
    description: str
    document: dict[str, Any] = Field(default_factory=dict)


_ALL_LAYERS: dict[str, Any] = {
    layer: {"enabled": True} for layer in ("domain", "usecase", "repository", "handler")
}

_STANDARD_NAMING: dict[str, str] = {
    "files": "lowercase",
    "entities": "PascalCase",
    "variables": "camelCase",
    "functions": "PascalCase",
}


PRESETS: dict[str, Preset] = {
    "minimal": Preset(
        name="minimal",
        title="Minimal",
        description="Lightweight starter with essential features only",
        document={
            "project": {"description": "Minimal Clean Architecture project"},
            "database": {"type": "postgres"},
            "architecture": {
                "layers": _ALL_LAYERS,
                "naming": {"files": "lowercase", "entities": "PascalCase"},
            },
            "generation": {"validation": {"enabled": True}},
            "testing": {"enabled": True, "framework": "testify"},
        },
    ),
    "rest-api": Preset(
        name="rest-api",
        title="REST API",
        description="Production-ready REST API with PostgreSQL, validation, and testing",
        document={
            "project": {"description": "REST API built with Clean Architecture"},
            "database": {
                "type": "postgres",
                "migrations": {"enabled": True, "auto_generate": True},
                "features": {"soft_delete": True, "timestamps": True, "uuid": False},
            },
            "architecture": {
                "layers": _ALL_LAYERS,
                "patterns": ["repository", "service", "dto"],
                "naming": _STANDARD_NAMING,
            },
            "generation": {
                "validation": {"enabled": True, "library": "builtin", "sanitize": True},
                "business_rules": {"enabled": True, "patterns": ["validation"]},
                "documentation": {
                    "swagger": {
                        "enabled": True,
                        "version": "2.0",
                        "title": "API Documentation",
                    },
                    "comments": {"enabled": True, "language": "english", "style": "godoc"},
                },
            },
            "testing": {
                "enabled": True,
                "framework": "testify",
                "coverage": {"enabled": True, "threshold": 70},
                "mocks": {"enabled": True, "tool": "testify"},
                "integration": True,
                "benchmarks": False,
            },
        },
    ),
    "microservice": Preset(
        name="microservice",
        title="Microservice",
        description="Microservice with events and comprehensive testing",
        document={
            "project": {"description": "Microservice built with Clean Architecture"},
            "database": {
                "type": "postgres",
                "migrations": {"enabled": True, "auto_generate": True},
                "features": {
                    "soft_delete": False,
                    "timestamps": True,
                    "uuid": True,
                    "audit": True,
                },
            },
            "architecture": {
                "layers": _ALL_LAYERS,
                "patterns": ["repository", "service", "dto", "specification"],
                "naming": _STANDARD_NAMING,
            },
            "generation": {
                "validation": {"enabled": True, "library": "validator", "sanitize": True},
                "business_rules": {
                    "enabled": True,
                    "patterns": ["validation", "authorization"],
                    "events": True,
                },
                "documentation": {
                    "swagger": {"enabled": True},
                    "comments": {"enabled": True, "language": "english"},
                },
            },
            "testing": {
                "enabled": True,
                "framework": "testify",
                "coverage": {"enabled": True, "threshold": 80},
                "mocks": {"enabled": True, "tool": "testify"},
                "integration": True,
                "benchmarks": True,
            },
        },
    ),
    "monolith": Preset(
        name="monolith",
        title="Monolith",
        description="Full-featured monolithic application with web interface",
        document={
            "project": {"description": "Monolithic application built with Clean Architecture"},
            "database": {
                "type": "postgres",
                "migrations": {"enabled": True, "auto_generate": True},
                "features": {
                    "soft_delete": True,
                    "timestamps": True,
                    "uuid": False,
                    "audit": True,
                    "versioning": True,
                },
            },
            "architecture": {
                "layers": _ALL_LAYERS,
                "patterns": ["repository", "service", "dto"],
                "naming": _STANDARD_NAMING,
            },
            "generation": {
                "validation": {
                    "enabled": True,
                    "library": "builtin",
                    "sanitize": True,
                    "transform": True,
                },
                "business_rules": {
                    "enabled": True,
                    "patterns": ["validation", "authorization"],
                    "guards": True,
                },
                "documentation": {
                    "swagger": {"enabled": True, "version": "2.0"},
                    "markdown": {"enabled": True, "toc": True},
                    "comments": {"enabled": True, "language": "english"},
                },
            },
            "testing": {
                "enabled": True,
                "framework": "testify",
                "coverage": {"enabled": True, "threshold": 75},
                "mocks": {"enabled": True},
                "integration": True,
                "benchmarks": False,
                "fixtures": {"enabled": True, "seeds": True},
            },
            "features": {
                "auth": {"enabled": True, "type": "jwt", "rbac": True},
                "cache": {"enabled": True, "type": "redis"},
                "logging": {
                    "enabled": True,
                    "level": "info",
                    "format": "json",
                    "structured": True,
                },
                "monitoring": {"enabled": True, "metrics": True, "health_check": True},
            },
        },
    ),
    "enterprise": Preset(
        name="enterprise",
        title="Enterprise",
        description="Enterprise-grade with all features, security, and monitoring",
        document={
            "project": {
                "description": "Enterprise application built with Clean Architecture",
                "version": "1.0.0",
            },
            "database": {
                "type": "postgres",
                "migrations": {
                    "enabled": True,
                    "auto_generate": True,
                    "versioning": "timestamp",
                },
                "connection": {"max_open": 100, "max_idle": 10},
                "features": {
                    "soft_delete": True,
                    "timestamps": True,
                    "uuid": True,
                    "audit": True,
                    "versioning": True,
                    "partitioning": False,
                },
            },
            "architecture": {
                "layers": _ALL_LAYERS,
                "patterns": ["repository", "service", "dto", "specification"],
                "naming": {**_STANDARD_NAMING, "constants": "UPPER_CASE"},
            },
            "generation": {
                "validation": {
                    "enabled": True,
                    "library": "validator",
                    "sanitize": True,
                    "transform": True,
                },
                "business_rules": {
                    "enabled": True,
                    "patterns": ["validation", "authorization"],
                    "events": True,
                    "guards": True,
                },
                "documentation": {
                    "swagger": {"enabled": True, "version": "3.0", "title": "Enterprise API"},
                    "postman": {"enabled": True, "environment": True, "tests": True},
                    "markdown": {"enabled": True, "toc": True, "examples": True},
                    "comments": {
                        "enabled": True,
                        "language": "english",
                        "style": "godoc",
                        "examples": True,
                    },
                },
                "style": {
                    "gofmt": True,
                    "goimports": True,
                    "golint": True,
                    "staticcheck": True,
                },
            },
            "testing": {
                "enabled": True,
                "framework": "testify",
                "coverage": {"enabled": True, "threshold": 85, "format": "html"},
                "mocks": {"enabled": True, "tool": "testify"},
                "integration": True,
                "benchmarks": True,
                "examples": True,
                "fixtures": {"enabled": True, "seeds": True, "factories": ["user", "admin"]},
            },
            "templates": {"directory": ".goca/templates"},
            "features": {
                "auth": {
                    "enabled": True,
                    "type": "jwt",
                    "providers": ["local", "oauth2"],
                    "rbac": True,
                    "middleware": True,
                },
                "cache": {
                    "enabled": True,
                    "type": "redis",
                    "ttl": "1h",
                    "layers": ["query", "entity"],
                },
                "logging": {
                    "enabled": True,
                    "level": "info",
                    "format": "json",
                    "output": ["stdout", "file"],
                    "structured": True,
                    "tracing": True,
                },
                "monitoring": {
                    "enabled": True,
                    "metrics": True,
                    "tracing": True,
                    "health_check": True,
                    "profiling": True,
                    "tools": ["prometheus"],
                },
                "security": {
                    "https": True,
                    "cors": True,
                    "rate_limit": True,
                    "validation": True,
                    "sanitization": True,
                    "headers": [
                        "X-Content-Type-Options",
                        "X-Frame-Options",
                        "X-XSS-Protection",
                    ],
                },
            },
            "deploy": {
                "docker": {"enabled": True, "multistage": True, "compose": True},
                "kubernetes": {
                    "enabled": True,
                    "manifests": "k8s",
                    "helm": True,
                    "ingress": True,
                    "config_maps": True,
                    "secrets": True,
                },
                "ci": {
                    "enabled": True,
                    "provider": "github-actions",
                    "workflows": ["test", "build", "deploy"],
                    "tests": True,
                    "build": True,
                    "deploy": True,
                },
            },
        },
    ),
}


def preset_names() -> list[str]:
    """Preset names, from the smallest to the most complete."""
    return list(PRESETS)


def get_preset(name: str) -> Preset:
    try:
        return PRESETS[name]
    except KeyError:
        raise PresetNotFoundError(name, PRESETS) from None


def build_initial_config(
    name: str,
    module: str,
    preset: Optional[str] = None,
    flags: CLIFlags | None = None,
) -> GocaConfig:
    """The fully resolved configuration a new project starts from.

    The preset (if any) is applied first, then *name* and *module*, then the
    defaults, then *flags*.

    Raises:
        ConfigValidationError: A flag value has the wrong type.
    """
    document = get_preset(preset).document if preset else {}
    config = GocaConfig.model_validate(document)
    set_path(config, "project.name", name)
    set_path(config, "project.module", module)

    resolution = resolve_defaults(config)
    merged = merge_flags(resolution.config, flags)
    ValidationReport(diagnostics=merged.diagnostics).raise_for_errors()
    resolution = rederive(
        resolution.model_copy(update={"config": merged.config}), merged.changed
    )
    return resolution.config


def init_config_file(
    project_root: str | Path,
    name: str,
    module: str,
    preset: Optional[str] = None,
    safety: SafetyCoordinator | None = None,
    flags: CLIFlags | None = None,
) -> WriteRecord:
    """Write ``.goca.yaml`` for a new project.

    Raises:
        PresetNotFoundError: *preset* is not a known preset.
        ConfigValidationError: The resulting configuration is invalid;
            nothing is written.
        FileConflictError, BackupError, FileWriteError: From *safety*.
    """
    config = build_initial_config(name, module, preset, flags)
    validate_config(config).raise_for_errors()

    coordinator = safety or SafetyCoordinator(project_root=project_root)
    target = Path(project_root).resolve() / DEFAULT_CONFIG_FILENAME
    return coordinator.write_file(target, dump_config_text(config))
