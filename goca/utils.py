"""Rich-based presentation helpers for goca.

The engine components (loader, resolver, merger, validator, safety
coordinator, name conflict detector) never print.  They return structured
results, and the front-end renders them with the helpers below.
"""

from __future__ import annotations

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from goca.config.context import ResolvedConfig
from goca.config.diagnostics import Severity, ValidationReport
from goca.scaffolder.safety import WriteRecord, WriteSummary

console = Console()

# (label, dotted path) rows of print_config_summary.
SUMMARY_FIELDS: tuple[tuple[str, str], ...] = (
    ("Project", "project.name"),
    ("Module", "project.module"),
    ("Domain directory", "architecture.layers.domain.directory"),
    ("DI", "architecture.di.type"),
    ("Database", "database.type"),
    ("Port", "database.port"),
    ("Database name", "database.name"),
    ("Soft delete", "database.features.soft_delete"),
    ("Auth", "features.auth.enabled"),
    ("Test framework", "testing.framework"),
    ("Coverage threshold", "testing.coverage.threshold"),
)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_bytes(size: int) -> str:
    """``512`` -> ``"512 B"``, ``2048`` -> ``"2.0 KB"``."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_section_header(title: str, color: str = "bright_cyan") -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold {color}] {title} [/bold {color}]", style=color))
    console.print()


def print_config_summary(resolved: ResolvedConfig, title: str = "Configuration") -> None:
    """Print the effective settings of a resolved configuration.

    Values that came from a derived default are tagged ``(derived)``.
    """
    config = resolved.config
    source = resolved.source_path or "none (defaults and flags only)"
    table = Table(
        title=title,
        caption=f"source: {source}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value")

    for label, path in SUMMARY_FIELDS:
        value = config.get(path)
        shown = "" if value is None else str(value)
        if path in resolved.derived:
            shown += " [dim](derived)[/dim]"
        table.add_row(label, shown)

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]error:[/bold red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]warning:[/bold yellow] {message}")


def print_diagnostics(report: ValidationReport, title: str = "Configuration") -> None:
    """Print every diagnostic of *report* as a table, errors first."""
    if not report.diagnostics:
        print_success(f"{title}: no problems found")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Field", style="dim", no_wrap=True)
    table.add_column("Message")
    table.add_column("Value")

    ordered = report.errors + report.warnings
    for diagnostic in ordered:
        style = "bold red" if diagnostic.severity is Severity.ERROR else "bold yellow"
        table.add_row(
            f"[{style}]{diagnostic.severity.value}[/{style}]",
            diagnostic.field,
            diagnostic.message,
            "" if diagnostic.value is None else repr(diagnostic.value),
        )

    console.print(table)
    if report.ok:
        print_warning(f"{len(report.warnings)} warning(s)")
    else:
        print_error(f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)")
    console.print()


def print_write_record(record: WriteRecord) -> None:
    """One line per write: ``Created:``, ``Overwrote:`` or ``Would create:``."""
    if record.dry_run:
        console.print(
            f"[cyan][DRY-RUN][/cyan] Would {record.action}: {record.path} "
            f"({record.size} bytes)"
        )
        return
    verb = "Overwrote" if record.existed else "Created"
    print_success(f"{verb}: {record.path}")
    if record.backup_path is not None:
        console.print(f"  [dim]backup: {record.backup_path}[/dim]")


def print_dry_run_summary(summary: WriteSummary) -> None:
    """Print the ledger of a run, with tips when it was a dry run."""
    if not summary.dry_run:
        print_success(f"Successfully created {summary.file_count} file(s)")
        if summary.backups:
            console.print(f"  [dim]{len(summary.backups)} backup(s) written[/dim]")
        return

    print_section_header("DRY-RUN SUMMARY")
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Action", no_wrap=True)
    table.add_column("Path")
    table.add_column("Size", justify="right")
    for record in summary.files:
        table.add_row(record.action, str(record.path), format_bytes(record.size))
    console.print(table)
    console.print(
        f"Would create {summary.file_count} file(s) "
        f"({format_bytes(summary.total_bytes)})"
    )

    if summary.conflicts:
        print_warning(f"{summary.conflict_count} conflict(s) detected:")
        for conflict in summary.conflicts:
            console.print(f"   - {conflict}")

    console.print()
    console.print("[dim]Tip: run without --dry-run to actually create files[/dim]")
    console.print("[dim]     use --force to overwrite existing files[/dim]")
    console.print("[dim]     use --backup to backup files before overwriting[/dim]")
