"""Shared pytest fixtures for the goca test suite.

Provides reusable fixtures for:
- Temporary project directories
- Writing configuration documents into a project
- Sample configuration documents
- Pre-resolved configurations
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from goca.config.defaults import create_default_config
from goca.config.models import GocaConfig


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary project root (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def domain_dir(tmp_project_dir: Path) -> Path:
    """``internal/domain`` inside the temporary project."""
    path = tmp_project_dir / "internal" / "domain"
    path.mkdir(parents=True)
    return path


# ---------------------------------------------------------------------------
# Configuration documents
# ---------------------------------------------------------------------------

@pytest.fixture
def write_config(tmp_project_dir: Path) -> Callable[..., Path]:
    """Write a YAML document into the project.

    Usage:
        def test_something(write_config):
            path = write_config('''
                project:
                  name: shop
            ''')
    """

    def _write(text: str, filename: str = ".goca.yaml") -> Path:
        path = tmp_project_dir / filename
        path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def minimal_config_text() -> str:
    """The smallest document that validates: name and module."""
    return textwrap.dedent(
        """\
        project:
          name: shop
          module: github.com/acme/shop
        """
    )


@pytest.fixture
def mysql_config_text() -> str:
    """A MySQL project with no explicit port."""
    return textwrap.dedent(
        """\
        project:
          name: shop
          module: github.com/acme/shop
          version: 0.3.0
        database:
          type: mysql
          host: db.internal
        architecture:
          naming:
            files: snake_case
        templates:
          variables:
            Author: ACME
        """
    )


@pytest.fixture
def default_config() -> GocaConfig:
    """A fully defaulted, valid configuration for project ``shop``."""
    return create_default_config("shop", "github.com/acme/shop")
