"""Safe file writing for generated artifacts.

Every generated file passes through :class:`SafetyCoordinator`, which combines
three independent toggles:

* ``dry_run``: record what would be written; never touch the filesystem
  beyond a read-only ``stat``.
* ``force``: allow overwriting a file that already exists.
* ``backup``: copy an existing file into the backup directory before it is
  overwritten.  The backup is fsynced before the original is replaced.

Per write request the coordinator walks::

    requested -> [dry-run: record only] -> check conflict
              -> [conflict and not force: FileConflictError]
              -> [backup and file exists: back up or BackupError]
              -> atomic write -> done

Each write is atomic on its own (temp file, fsync, rename), so a reader sees
either the old or the new content, never a mix.  There is no transaction
across files.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from goca.errors import BackupError, FileConflictError, FileWriteError


DEFAULT_BACKUP_DIR = ".goca-backup"
BACKUP_SUFFIX = ".backup"


class WriteRecord(BaseModel):
    """Ledger entry for one write request."""

    path: Path
    size: int = Field(..., ge=0, description="Content size in bytes")
    existed: bool = Field(default=False, description="A file was already at path")
    dry_run: bool = False
    backup_path: Optional[Path] = None

    @property
    def action(self) -> str:
        return "overwrite" if self.existed else "create"


class WriteSummary(BaseModel):
    """Aggregate of the ledger, for display by the front-end."""

    dry_run: bool
    files: list[WriteRecord] = Field(default_factory=list)
    conflicts: list[Path] = Field(default_factory=list)
    backups: list[Path] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def file_count(self) -> int:
        return len(self.files)

    @computed_field  # type: ignore[misc]
    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)

    @computed_field  # type: ignore[misc]
    @property
    def total_bytes(self) -> int:
        return sum(record.size for record in self.files)


# ---------------------------------------------------------------------------
# Atomic I/O
# ---------------------------------------------------------------------------


def _fsync_directory(directory: Path) -> None:
    try:
        dir_fd = os.open(str(directory), os.O_RDONLY)
    except OSError:
        return  # e.g. Windows: directory fsync is not supported
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        os.close(dir_fd)


def atomic_write_bytes(final_path: Path, data: bytes, mode: int = 0o644) -> None:
    """Write *data* to *final_path*: temp -> fsync -> rename -> fsync dir.

    The temp file lives next to the destination so the rename is atomic.  On
    failure the temp file is removed and the destination is left untouched.
    """
    directory = final_path.parent
    temp_path = directory / f".{final_path.name}.{os.getpid()}.{uuid.uuid4().hex[:8]}.tmp"
    try:
        fd = os.open(str(temp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        try:
            view = memoryview(data)
            while view:
                written = os.write(fd, view)
                view = view[written:]
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(temp_path, final_path)
        _fsync_directory(directory)
    finally:
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Coordinator
# ---------------------------------------------------------------------------


class SafetyCoordinator:
    """Single choke-point for every generated file write.

    Args:
        dry_run: Record writes without performing them.
        force: Overwrite existing files.
        backup: Back up existing files before overwriting them.
        backup_dir: Backup directory, relative to *project_root* unless
            absolute.
        project_root: Base for relative paths.  Defaults to the current
            directory.
    """

    def __init__(
        self,
        dry_run: bool = False,
        force: bool = False,
        backup: bool = False,
        backup_dir: str | Path = DEFAULT_BACKUP_DIR,
        project_root: str | Path | None = None,
    ) -> None:
        self.dry_run = dry_run
        self.force = force
        self.backup = backup
        self.project_root = Path(project_root) if project_root is not None else Path(".")
        backup_root = Path(backup_dir)
        if not backup_root.is_absolute():
            backup_root = self.project_root / backup_root
        self.backup_dir = backup_root

        self._records: list[WriteRecord] = []
        self._conflicts: list[Path] = []
        self._backups: list[Path] = []

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    def _target(self, path: str | Path) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.project_root / candidate

    def _relative(self, target: Path) -> Path:
        try:
            return target.resolve().relative_to(self.project_root.resolve())
        except ValueError:
            # Outside the project: mirror the absolute path under the backup dir.
            return Path(*target.resolve().parts[1:])

    def backup_path_for(self, path: str | Path) -> Path:
        """``<backup_dir>/<path relative to the project root>.backup``."""
        relative = self._relative(self._target(path))
        return self.backup_dir / relative.parent / f"{relative.name}{BACKUP_SUFFIX}"

    def _record_conflict(self, target: Path) -> None:
        if target not in self._conflicts:
            self._conflicts.append(target)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def check_file_conflict(self, path: str | Path) -> None:
        """Fail iff a file exists at *path* and force mode is off.

        In dry-run mode an existing file is recorded as a conflict and the
        check succeeds, since nothing will be written.

        Raises:
            FileConflictError: If the file exists and neither ``force`` nor
                ``dry_run`` is on.
        """
        target = self._target(path)
        if not target.exists():
            return
        self._record_conflict(target)
        if self.dry_run or self.force:
            return
        raise FileConflictError(target)

    def backup_file(self, path: str | Path) -> Path:
        """Copy the current content of *path* into the backup directory.

        The copy is durable (fsynced) when this returns.

        Raises:
            BackupError: If the source cannot be read or the copy cannot be
                written.  The source is never modified.
        """
        target = self._target(path)
        backup_path = self.backup_path_for(target)
        try:
            content = target.read_bytes()
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_bytes(backup_path, content)
        except OSError as exc:
            raise BackupError(target, backup_path, str(exc)) from exc
        self._backups.append(backup_path)
        return backup_path

    def write_file(self, path: str | Path, content: str) -> WriteRecord:
        """Write *content* to *path* under the coordinator's policy.

        Raises:
            FileConflictError: The file exists and force mode is off.
            BackupError: Backup was requested and could not be made; the
                original file is left as it was.
            FileWriteError: The new content could not be written.
        """
        target = self._target(path)
        data = content.encode("utf-8")

        if self.dry_run:
            existed = target.exists()
            if existed:
                self._record_conflict(target)
            record = WriteRecord(path=target, size=len(data), existed=existed, dry_run=True)
            self._records.append(record)
            return record

        self.check_file_conflict(target)
        existed = target.exists()

        backup_path: Optional[Path] = None
        if self.backup and existed:
            backup_path = self.backup_file(target)

        try:
            mode = (target.stat().st_mode & 0o777) if existed else 0o644
            target.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_bytes(target, data, mode=mode)
        except OSError as exc:
            raise FileWriteError(target, str(exc)) from exc

        record = WriteRecord(
            path=target, size=len(data), existed=existed, backup_path=backup_path
        )
        self._records.append(record)
        return record

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    def get_created_files(self) -> list[Path]:
        """Paths written (or, in dry-run, that would have been), in order."""
        return [record.path for record in self._records]

    def get_conflicts(self) -> list[Path]:
        return list(self._conflicts)

    def get_backups(self) -> list[Path]:
        return list(self._backups)

    @property
    def records(self) -> list[WriteRecord]:
        return list(self._records)

    def summary(self) -> WriteSummary:
        return WriteSummary(
            dry_run=self.dry_run,
            files=list(self._records),
            conflicts=list(self._conflicts),
            backups=list(self._backups),
        )
