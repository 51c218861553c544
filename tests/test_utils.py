"""Unit tests for presentation helpers (goca.utils).

Tests cover:
- format_bytes
- Rich output helpers (print_section_header, print_config_summary, etc.)
- print_diagnostics for clean, warning-only and failing reports
- print_write_record / print_dry_run_summary
"""

from __future__ import annotations

from pathlib import Path

import pytest

from goca.config.context import ConfigContext
from goca.config.diagnostics import Diagnostic, ValidationReport
from goca.config.flags import CLIFlags
from goca.scaffolder.safety import SafetyCoordinator, WriteRecord
from goca.utils import (
    format_bytes,
    print_config_summary,
    print_diagnostics,
    print_dry_run_summary,
    print_error,
    print_section_header,
    print_success,
    print_warning,
    print_write_record,
)


# ---------------------------------------------------------------------------
# format_bytes
# ---------------------------------------------------------------------------


class TestFormatBytes:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("size", "expected"),
        [(0, "0 B"), (512, "512 B"), (2048, "2.0 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_format(self, size: int, expected: str):
        assert format_bytes(size) == expected


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_section_header(self):
        # Should not raise
        print_section_header("CONFIGURATION")

    @pytest.mark.unit
    def test_print_config_summary(self, capsys, tmp_project_dir: Path):
        flags = CLIFlags(name="shop", module="github.com/acme/shop", database="mysql")
        print_config_summary(ConfigContext(tmp_project_dir, flags).resolve())
        out = capsys.readouterr().out
        assert "github.com/acme/shop" in out
        assert "mysql" in out
        assert "3306 (derived)" in out
        assert "defaults and flags only" in out

    @pytest.mark.unit
    def test_config_summary_from_file(
        self, capsys, write_config, minimal_config_text: str
    ):
        path = write_config(minimal_config_text)
        print_config_summary(ConfigContext(path.parent).resolve())
        out = capsys.readouterr().out
        assert "source:" in out
        assert "defaults and flags only" not in out
        assert "5432 (derived)" in out

    @pytest.mark.unit
    def test_print_success(self, capsys):
        print_success("done")
        assert "done" in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_error(self, capsys):
        print_error("failed")
        assert "failed" in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_warning(self, capsys):
        print_warning("careful")
        assert "careful" in capsys.readouterr().out


class TestPrintDiagnostics:
    @pytest.mark.unit
    def test_clean_report(self, capsys):
        print_diagnostics(ValidationReport())
        assert "no problems found" in capsys.readouterr().out

    @pytest.mark.unit
    def test_warnings_only(self, capsys):
        report = ValidationReport(diagnostics=[Diagnostic.warning("db.port", "set", 5432)])
        print_diagnostics(report)
        assert "1 warning(s)" in capsys.readouterr().out

    @pytest.mark.unit
    def test_errors(self, capsys):
        report = ValidationReport(
            diagnostics=[
                Diagnostic.warning("db.port", "set", 5432),
                Diagnostic.error("db.type", "bad", "oracle"),
            ]
        )
        print_diagnostics(report)
        assert "1 error(s), 1 warning(s)" in capsys.readouterr().out


class TestWriteOutput:
    @pytest.mark.unit
    def test_dry_run_record(self, capsys):
        print_write_record(WriteRecord(path=Path("a.go"), size=3, dry_run=True))
        out = capsys.readouterr().out
        assert "DRY-RUN" in out
        assert "Would create" in out

    @pytest.mark.unit
    def test_overwrite_record(self, capsys):
        print_write_record(
            WriteRecord(path=Path("a.go"), size=3, existed=True, backup_path=Path("b"))
        )
        out = capsys.readouterr().out
        assert "Overwrote" in out
        assert "backup" in out

    @pytest.mark.unit
    def test_dry_run_summary(self, capsys, tmp_project_dir: Path):
        (tmp_project_dir / "a.go").write_text("old")
        safety = SafetyCoordinator(dry_run=True, project_root=tmp_project_dir)
        safety.write_file("a.go", "new")
        safety.write_file("b.go", "new")
        print_dry_run_summary(safety.summary())
        out = capsys.readouterr().out
        assert "Would create 2 file(s)" in out
        assert "1 conflict(s) detected" in out

    @pytest.mark.unit
    def test_real_run_summary(self, capsys, tmp_project_dir: Path):
        safety = SafetyCoordinator(project_root=tmp_project_dir)
        safety.write_file("a.go", "x")
        print_dry_run_summary(safety.summary())
        assert "Successfully created 1 file(s)" in capsys.readouterr().out
