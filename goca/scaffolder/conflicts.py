"""Detection of constructs that already exist in the project tree.

By convention each generated construct (entity) lives in its own file in the
domain layer directory, e.g. ``internal/domain/user.go``.  The detector scans
that directory once per instance and compares names by their words alone,
ignoring case and separators, so ``OrderItem`` collides with an existing
``order_item.go`` or ``orderitem.go`` whatever file convention wrote it.
"""

from __future__ import annotations

from pathlib import Path

from goca.errors import NameConflictError
from goca.naming import to_lower_case


DEFAULT_DOMAIN_DIR = "internal/domain"

# Companion files generated next to an entity.
_COMPANION_SUFFIXES: tuple[str, ...] = ("_seeds", "_test")

# Shared domain files that are not constructs.
NON_CONSTRUCT_FILES: frozenset[str] = frozenset(
    {"errors", "messages", "constants", "interfaces", "doc"}
)


def construct_key(name: str) -> str:
    """``OrderItem`` / ``order_item`` / ``ORDERITEM`` -> ``orderitem``."""
    return to_lower_case(name)


class NameConflictDetector:
    """Scan the domain directory and reject duplicate construct names.

    Args:
        project_root: Project directory.
        domain_dir: Directory holding one file per construct, relative to
            *project_root*.  Defaults to ``internal/domain``.
        extension: File extension of construct files.
    """

    def __init__(
        self,
        project_root: str | Path = ".",
        domain_dir: str | Path | None = None,
        extension: str = ".go",
    ) -> None:
        self.project_root = Path(project_root)
        self.domain_dir = self.project_root / (domain_dir or DEFAULT_DOMAIN_DIR)
        self.extension = extension
        # construct key -> file it was found in
        self._entities: dict[str, Path] = {}

    def scan_existing_entities(self) -> list[str]:
        """Re-read the domain directory and return the construct keys found.

        A missing directory simply means nothing has been generated yet.
        """
        self._entities.clear()
        if not self.domain_dir.is_dir():
            return []

        for entry in sorted(self.domain_dir.iterdir()):
            if not entry.is_file() or entry.suffix != self.extension:
                continue
            name = entry.stem
            for suffix in _COMPANION_SUFFIXES:
                if name.endswith(suffix) and len(name) > len(suffix):
                    name = name[: -len(suffix)]
                    break
            key = construct_key(name)
            if not key or key in NON_CONSTRUCT_FILES:
                continue
            self._entities.setdefault(key, entry)
        return self.get_existing_entities()

    def check_name_conflict(self, name: str) -> None:
        """Raise if *name* matches a scanned construct.

        Raises:
            NameConflictError: When *name* and an existing construct have the
                same :func:`construct_key`.
        """
        existing = self._entities.get(construct_key(name))
        if existing is not None:
            raise NameConflictError(name, existing.stem)

    def has_entity(self, name: str) -> bool:
        return construct_key(name) in self._entities

    def get_existing_entities(self) -> list[str]:
        """Construct keys, sorted."""
        return sorted(self._entities)
