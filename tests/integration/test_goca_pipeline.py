"""Integration tests for the init-then-generate workflow.

These tests run the real configuration pipeline and scaffolder end-to-end
against a temporary project directory: a preset writes ``.goca.yaml``, a
fresh context resolves it together with command-line flags, and entities are
generated through the safety coordinator.

No external services are required.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from goca.config import CLIFlags, ConfigContext, init_config_file
from goca.errors import ConfigValidationError, FileConflictError, NameConflictError
from goca.scaffolder import EntityGenerator, SafetyCoordinator


pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def initialised_project(tmp_project_dir: Path) -> Path:
    init_config_file(tmp_project_dir, "shop", "github.com/acme/shop", preset="rest-api")
    return tmp_project_dir


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestInitThenGenerate:
    def test_written_config_is_plain_yaml(self, initialised_project: Path):
        document = yaml.safe_load((initialised_project / ".goca.yaml").read_text())
        assert document["project"]["name"] == "shop"
        assert document["database"]["port"] == 5432
        assert document["testing"]["coverage"]["threshold"] == 70.0

    def test_generate_entity(self, initialised_project: Path):
        context = ConfigContext(initialised_project)
        safety = SafetyCoordinator(project_root=initialised_project)
        written = EntityGenerator(context, safety).generate("Product", "name:string,price:float64")

        # rest-api names files in lowercase
        assert written == [
            initialised_project / "internal/domain/product.go",
            initialised_project / "internal/usecase/productdto.go",
        ]
        entity = written[0].read_text()
        assert "DeletedAt gorm.DeletedAt" in entity
        dto = written[1].read_text()
        assert 'import "github.com/acme/shop/internal/domain"' in dto

    def test_second_generation_conflicts(self, initialised_project: Path):
        def run() -> list[Path]:
            context = ConfigContext(initialised_project)
            safety = SafetyCoordinator(project_root=initialised_project)
            return EntityGenerator(context, safety).generate("Product", "name:string")

        run()
        with pytest.raises(NameConflictError):
            run()

    def test_flag_overrides_apply_to_generation(self, initialised_project: Path):
        context = ConfigContext(initialised_project, CLIFlags(soft_delete=False, database="mysql"))
        assert context.config.database.port == 5432  # explicit in the written file
        safety = SafetyCoordinator(project_root=initialised_project)
        written = EntityGenerator(context, safety).generate("Order", "total:float64")
        assert "DeletedAt" not in written[0].read_text()

    def test_dry_run_changes_nothing(self, initialised_project: Path):
        before = _snapshot(initialised_project)
        context = ConfigContext(initialised_project)
        safety = SafetyCoordinator(dry_run=True, backup=True, project_root=initialised_project)
        written = EntityGenerator(context, safety).generate("Product", "name:string")
        assert len(written) == 2
        assert _snapshot(initialised_project) == before

    def test_invalid_threshold_generates_nothing(self, initialised_project: Path):
        before = _snapshot(initialised_project)
        context = ConfigContext(initialised_project, CLIFlags(coverage_threshold=150))
        safety = SafetyCoordinator(project_root=initialised_project)
        with pytest.raises(ConfigValidationError) as exc_info:
            EntityGenerator(context, safety).generate("Product", "name:string")
        assert [d.field for d in exc_info.value.errors] == ["testing.coverage.threshold"]
        assert safety.get_created_files() == []
        assert _snapshot(initialised_project) == before

    def test_reinit_requires_force(self, initialised_project: Path):
        with pytest.raises(FileConflictError):
            init_config_file(initialised_project, "shop", "shop", preset="minimal")

        safety = SafetyCoordinator(force=True, backup=True, project_root=initialised_project)
        record = init_config_file(initialised_project, "shop", "shop", preset="minimal", safety=safety)
        assert record.backup_path is not None
        assert record.backup_path.is_file()
        assert ConfigContext(initialised_project).config.project.module == "shop"
