"""goca scaffolder -- renders and safely writes generated artifacts.

Key classes:
    TemplateRenderer      - Jinja2 rendering with identifier case helpers
    TemplateData          - Typed render context for one construct
    SafetyCoordinator     - Dry-run, conflict, backup and force handling
    NameConflictDetector  - Case-insensitive duplicate construct detection
    EntityGenerator       - Generates one entity through all of the above
"""

from goca.scaffolder.conflicts import NameConflictDetector
from goca.scaffolder.fields import FieldSpec, parse_fields, validate_entity_name
from goca.scaffolder.safety import SafetyCoordinator, WriteRecord, WriteSummary
from goca.scaffolder.templates import TemplateData, TemplateRenderer
from goca.scaffolder.generator import EntityGenerator

__all__ = [
    "EntityGenerator",
    "FieldSpec",
    "NameConflictDetector",
    "SafetyCoordinator",
    "TemplateData",
    "TemplateRenderer",
    "WriteRecord",
    "WriteSummary",
    "parse_fields",
    "validate_entity_name",
]
