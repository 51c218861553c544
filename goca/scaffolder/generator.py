"""Entity scaffolding.

:class:`EntityGenerator` is the consumer of the configuration engine: it
resolves the effective configuration, refuses to shadow an existing entity,
renders the entity templates and hands every file to the
:class:`~goca.scaffolder.safety.SafetyCoordinator`.

Quick usage::

    from goca.config import ConfigContext, CLIFlags
    from goca.scaffolder import EntityGenerator, SafetyCoordinator

    context = ConfigContext(".", CLIFlags(database="postgres"))
    safety = SafetyCoordinator(dry_run=True, project_root=".")
    EntityGenerator(context, safety).generate("Product", "name:string,price:float64")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from goca.config.context import ConfigContext
from goca.config.flags import UNSET
from goca.naming import apply_convention
from goca.scaffolder.conflicts import NameConflictDetector
from goca.scaffolder.fields import FieldSpec, parse_fields, validate_entity_name
from goca.scaffolder.safety import SafetyCoordinator
from goca.scaffolder.templates import TemplateData, TemplateRenderer


GO_EXTENSION = ".go"

ENTITY_TEMPLATE = "domain/entity"
DTO_TEMPLATE = "usecase/dto"


class EntityGenerator:
    """Generates the files for one entity.

    Args:
        context: Configuration context of the current invocation.
        safety: Coordinator every write goes through.
        renderer: Template renderer.  Built from ``templates.*`` when omitted.
        detector: Name conflict detector.  Scans the configured domain
            directory when omitted.
    """

    def __init__(
        self,
        context: ConfigContext,
        safety: SafetyCoordinator,
        renderer: Optional[TemplateRenderer] = None,
        detector: Optional[NameConflictDetector] = None,
    ) -> None:
        self.context = context
        self.safety = safety
        self._renderer = renderer
        self._detector = detector

    # -- Collaborators -----------------------------------------------------

    @property
    def renderer(self) -> TemplateRenderer:
        if self._renderer is None:
            self._renderer = TemplateRenderer.from_config(
                self.context.config, self.context.project_root
            )
        return self._renderer

    @property
    def detector(self) -> NameConflictDetector:
        if self._detector is None:
            self._detector = NameConflictDetector(
                self.context.project_root,
                domain_dir=self.context.get_layer_directory("domain"),
                extension=GO_EXTENSION,
            )
        return self._detector

    # -- Public API --------------------------------------------------------

    def file_name(self, *words: str) -> str:
        """File name in the configured ``architecture.naming.files`` style."""
        convention = self.context.get_naming_convention("files")
        return apply_convention(" ".join(words), convention) + GO_EXTENSION

    def build_data(
        self,
        entity: str,
        fields: list[FieldSpec],
        validation: Any = UNSET,
        business_rules: Any = UNSET,
    ) -> TemplateData:
        data = TemplateData.from_config(self.context.config, entity, fields)
        data.validation = self.context.get_validation_enabled(validation)
        data.business_rules = self.context.get_business_rules_enabled(business_rules)
        return data

    def generate(
        self,
        entity: str,
        fields: str | list[FieldSpec],
        validation: Any = UNSET,
        business_rules: Any = UNSET,
    ) -> list[Path]:
        """Generate the entity (and its DTOs when the use-case layer is on).

        *validation* and *business_rules* are per-call overrides that win
        over the resolved configuration.

        Returns:
            The paths written, or that would be written in dry-run mode.

        Raises:
            ConfigValidationError: The configuration is invalid; nothing is
                written.
            FieldSpecError: *entity* or *fields* is malformed.
            NameConflictError: An entity with that name already exists.
            FileConflictError, BackupError, FileWriteError: From the safety
                coordinator.
        """
        validate_entity_name(entity)
        parsed = parse_fields(fields) if isinstance(fields, str) else list(fields)

        # Resolve before anything touches disk
        self.context.resolve()

        self.detector.scan_existing_entities()
        self.detector.check_name_conflict(entity)

        data = self.build_data(entity, parsed, validation, business_rules)
        written: list[Path] = []

        if self.context.is_layer_enabled("domain"):
            content = self.renderer.render(ENTITY_TEMPLATE, data)
            target = Path(self.context.get_layer_directory("domain")) / self.file_name(entity)
            written.append(self.safety.write_file(target, content).path)

        if self.context.is_layer_enabled("usecase"):
            content = self.renderer.render(DTO_TEMPLATE, data)
            target = Path(self.context.get_layer_directory("usecase")) / self.file_name(
                entity, "dto"
            )
            written.append(self.safety.write_file(target, content).path)

        return written
