"""Unit tests for the name conflict detector (goca.scaffolder.conflicts)."""

from __future__ import annotations

from pathlib import Path

import pytest

from goca.errors import NameConflictError
from goca.scaffolder.conflicts import NON_CONSTRUCT_FILES, NameConflictDetector


pytestmark = pytest.mark.unit


def _touch(directory: Path, *names: str) -> None:
    for name in names:
        (directory / name).write_text("package domain\n")


class TestScan:
    def test_missing_directory(self, tmp_project_dir: Path):
        detector = NameConflictDetector(tmp_project_dir)
        assert detector.scan_existing_entities() == []

    def test_lists_constructs(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "user.go", "Product.go", "order.go")
        detector = NameConflictDetector(tmp_project_dir)
        assert detector.scan_existing_entities() == ["order", "product", "user"]

    def test_companion_files_collapse(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "user.go", "user_seeds.go", "user_test.go", "order_test.go")
        detector = NameConflictDetector(tmp_project_dir)
        assert detector.get_existing_entities() == []
        assert detector.scan_existing_entities() == ["order", "user"]

    def test_shared_files_are_ignored(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, *(f"{name}.go" for name in NON_CONSTRUCT_FILES))
        assert NameConflictDetector(tmp_project_dir).scan_existing_entities() == []

    def test_other_extensions_and_directories(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "user.go", "notes.md")
        (domain_dir / "nested.go").mkdir()
        assert NameConflictDetector(tmp_project_dir).scan_existing_entities() == ["user"]

    def test_custom_domain_dir(self, tmp_project_dir: Path):
        custom = tmp_project_dir / "pkg" / "model"
        custom.mkdir(parents=True)
        _touch(custom, "invoice.go")
        detector = NameConflictDetector(tmp_project_dir, domain_dir="pkg/model")
        assert detector.scan_existing_entities() == ["invoice"]

    def test_rescan_sees_new_files(self, tmp_project_dir: Path, domain_dir: Path):
        detector = NameConflictDetector(tmp_project_dir)
        detector.scan_existing_entities()
        _touch(domain_dir, "user.go")
        assert detector.scan_existing_entities() == ["user"]


class TestCheckNameConflict:
    @pytest.mark.parametrize("name", ["User", "user", "USER"])
    def test_case_insensitive_match(self, tmp_project_dir: Path, domain_dir: Path, name: str):
        _touch(domain_dir, "user.go")
        detector = NameConflictDetector(tmp_project_dir)
        detector.scan_existing_entities()
        with pytest.raises(NameConflictError) as exc_info:
            detector.check_name_conflict(name)
        assert exc_info.value.name == name
        assert exc_info.value.existing == "user"
        assert str(exc_info.value) == f"Entity '{name}' already exists in the project"

    def test_new_name_passes(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "user.go")
        detector = NameConflictDetector(tmp_project_dir)
        detector.scan_existing_entities()
        detector.check_name_conflict("Product")
        assert detector.has_entity("USER")
        assert not detector.has_entity("Product")

    @pytest.mark.parametrize("existing", ["order_item.go", "order-item.go", "OrderItem.go", "orderitem.go"])
    @pytest.mark.parametrize("name", ["OrderItem", "ORDERITEM", "order_item", "orderItem"])
    def test_multi_word_names_match_any_file_style(
        self, tmp_project_dir: Path, domain_dir: Path, existing: str, name: str
    ):
        _touch(domain_dir, existing)
        detector = NameConflictDetector(tmp_project_dir)
        assert detector.scan_existing_entities() == ["orderitem"]
        with pytest.raises(NameConflictError) as exc_info:
            detector.check_name_conflict(name)
        assert exc_info.value.existing == existing[: -len(".go")]

    def test_distinct_words_do_not_match(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "order_item.go")
        detector = NameConflictDetector(tmp_project_dir)
        detector.scan_existing_entities()
        detector.check_name_conflict("Order")
        detector.check_name_conflict("OrderItems")

    def test_companion_only_entity_conflicts(self, tmp_project_dir: Path, domain_dir: Path):
        _touch(domain_dir, "order_seeds.go")
        detector = NameConflictDetector(tmp_project_dir)
        detector.scan_existing_entities()
        with pytest.raises(NameConflictError):
            detector.check_name_conflict("Order")
