"""Jinja2 template rendering for generated artifacts.

Provides the :class:`TemplateRenderer`, which renders inline template strings
and named templates against a data mapping, and :class:`TemplateData`, the
typed builder for that mapping.

Named templates are looked up first in the user's override directory
(``templates.directory``, files ending in ``.tmpl``, ``.tpl`` or ``.j2``) and
then among the built-in ``.j2`` templates shipped in
``goca/scaffolder/templates/``.  A template name is its path relative to the
template root without the extension, e.g. ``"domain/entity"``.

Every identifier helper from :mod:`goca.naming` is available both as a filter
(``{{ name | snake }}``) and as a function (``{{ toSnakeCase(name) }}``).
Undefined variables and helpers are errors, never empty output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)
from pydantic import BaseModel, Field

from goca.errors import TemplateNotFoundError, TemplateRenderError
from goca.naming import (
    pluralize,
    singularize,
    to_camel_case,
    to_kebab_case,
    to_lower_case,
    to_pascal_case,
    to_snake_case,
    to_title,
    to_upper_case,
)
from goca.scaffolder.fields import FieldSpec


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Lookup order for a template name; user overrides win over built-ins.
TEMPLATE_EXTENSIONS: tuple[str, ...] = (".tmpl", ".tpl", ".j2")

NAMING_KINDS: tuple[str, ...] = (
    "entities", "fields", "files", "packages", "constants", "variables", "functions",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

HELPERS: dict[str, Callable[..., Any]] = {
    "title": to_title,
    "lower": lambda s: str(s).lower(),
    "upper": lambda s: str(s).upper(),
    "camel": to_camel_case,
    "pascal": to_pascal_case,
    "snake": to_snake_case,
    "kebab": to_kebab_case,
    "upper_case": to_upper_case,
    "lowercase": to_lower_case,
    "plural": pluralize,
    "singular": singularize,
    "trim_space": lambda s: str(s).strip(),
    "has_prefix": lambda s, prefix: str(s).startswith(prefix),
    "has_suffix": lambda s, suffix: str(s).endswith(suffix),
    "contains": lambda s, sub: sub in s,
    # Aliases used by existing template sets
    "toCamelCase": to_camel_case,
    "toPascalCase": to_pascal_case,
    "toSnakeCase": to_snake_case,
    "toKebabCase": to_kebab_case,
    "toUpperCase": to_upper_case,
    "toPlural": pluralize,
    "toSingular": singularize,
    "trimSpace": lambda s: str(s).strip(),
    "hasPrefix": lambda s, prefix: str(s).startswith(prefix),
    "hasSuffix": lambda s, suffix: str(s).endswith(suffix),
}


# ---------------------------------------------------------------------------
# Template data
# ---------------------------------------------------------------------------


class TemplateData(BaseModel):
    """Typed render context for one generated construct.

    Known inputs are typed fields; ``variables`` is the open-ended map from
    ``templates.variables`` and is the only untyped part.
    """

    project_name: str = ""
    module: str = ""
    entity: str = Field(default="", description="Canonical construct name, e.g. 'User'")
    fields: list[FieldSpec] = Field(default_factory=list)
    database: str = ""
    validation: bool = False
    business_rules: bool = False
    timestamps: bool = False
    soft_delete: bool = False
    uuid: bool = False
    auth: bool = False
    swagger: bool = False
    naming: dict[str, str] = Field(default_factory=dict)
    variables: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_config(
        cls,
        config: Any,
        entity: str = "",
        fields: Optional[list[FieldSpec]] = None,
    ) -> "TemplateData":
        """Build from a resolved configuration (a ``ConfigView`` or model)."""
        naming = config.architecture.naming
        return cls(
            project_name=config.project.name,
            module=config.project.module,
            entity=entity,
            fields=list(fields or []),
            database=config.database.type,
            validation=config.generation.validation.enabled,
            business_rules=config.generation.business_rules.enabled,
            timestamps=config.database.features.timestamps,
            soft_delete=config.database.features.soft_delete,
            uuid=config.database.features.uuid,
            auth=config.features.auth.enabled,
            swagger=config.generation.documentation.swagger.enabled,
            naming={kind: getattr(naming, kind) for kind in NAMING_KINDS},
            variables=dict(config.templates.variables),
        )

    def to_context(self) -> dict[str, Any]:
        """The mapping handed to Jinja2.

        Free-form variables come first so that typed keys always win.
        """
        context: dict[str, Any] = dict(self.variables)
        context.update(self.model_dump(exclude={"variables"}))
        context["fields"] = [field.model_dump() for field in self.fields]
        if self.entity:
            context.update(
                entity_name=to_pascal_case(self.entity),
                entity_var=to_camel_case(self.entity),
                entity_snake=to_snake_case(self.entity),
                entity_plural=pluralize(to_pascal_case(self.entity)),
                entity_table=pluralize(to_snake_case(self.entity)),
            )
        return context


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated artifacts.

    Args:
        template_dir: User override directory.  Templates found there shadow
            the built-in templates of the same name.  A missing directory is
            not an error.
        variables: Substitution variables merged under every render's data.
        builtin_dir: Directory of built-in ``.j2`` templates.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        variables: Mapping[str, str] | None = None,
        builtin_dir: str | Path | None = None,
    ) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else None
        self.builtin_dir = Path(builtin_dir) if builtin_dir is not None else _DEFAULT_TEMPLATE_DIR
        self.variables: dict[str, str] = dict(variables or {})

        loaders = []
        if self.template_dir is not None:
            loaders.append(FileSystemLoader(str(self.template_dir)))
        loaders.append(FileSystemLoader(str(self.builtin_dir)))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register helpers as filters and as callables
        self.env.filters.update(HELPERS)
        self.env.globals.update(HELPERS)

    @classmethod
    def from_config(cls, config: Any, project_root: str | Path = ".") -> "TemplateRenderer":
        """Renderer for ``templates.directory`` / ``templates.variables``."""
        directory = config.templates.directory
        template_dir = Path(project_root) / directory if directory else None
        return cls(template_dir=template_dir, variables=dict(config.templates.variables))

    # -- Data --------------------------------------------------------------

    def _enrich(self, data: Mapping[str, Any] | TemplateData | None) -> dict[str, Any]:
        if isinstance(data, TemplateData):
            data = data.to_context()
        merged: dict[str, Any] = dict(self.variables)
        merged.update(data or {})
        merged.setdefault("template_directory", str(self.template_dir or ""))
        merged.setdefault("template_variables", dict(self.variables))
        return merged

    # -- Rendering ---------------------------------------------------------

    def render_string(
        self,
        template_string: str,
        data: Mapping[str, Any] | TemplateData | None = None,
        name: str = "<string>",
    ) -> str:
        """Render an inline template string.

        Raises:
            TemplateRenderError: On a syntax error, or a reference to an
                undefined variable or helper.
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(**self._enrich(data))
        except (TemplateError, TypeError, ValueError) as exc:
            raise TemplateRenderError(name, str(exc) or type(exc).__name__) from exc

    def _resolve_name(self, name: str) -> Optional[str]:
        assert self.env.loader is not None
        for extension in TEMPLATE_EXTENSIONS:
            candidate = f"{name}{extension}"
            try:
                self.env.loader.get_source(self.env, candidate)
            except TemplateNotFound:
                continue
            return candidate
        return None

    def has_template(self, name: str) -> bool:
        """Whether a user or built-in template exists for *name*."""
        return self._resolve_name(name) is not None

    def has_user_template(self, name: str) -> bool:
        if self.template_dir is None or not self.template_dir.is_dir():
            return False
        return any(
            (self.template_dir / f"{name}{extension}").is_file()
            for extension in TEMPLATE_EXTENSIONS
        )

    def render(self, name: str, data: Mapping[str, Any] | TemplateData | None = None) -> str:
        """Render the template called *name* (``"domain/entity"``).

        Raises:
            TemplateNotFoundError: If neither a user nor a built-in template
                exists for *name*.
            TemplateRenderError: If rendering fails.
        """
        resolved = self._resolve_name(name)
        if resolved is None:
            raise TemplateNotFoundError(name)
        try:
            template = self.env.get_template(resolved)
            return template.render(**self._enrich(data))
        except (TemplateError, TypeError, ValueError) as exc:
            raise TemplateRenderError(name, str(exc) or type(exc).__name__) from exc

    # -- Utility -----------------------------------------------------------

    def list_templates(self) -> list[str]:
        """Sorted names of every available template, user and built-in."""
        names: set[str] = set()
        for root in (self.template_dir, self.builtin_dir):
            if root is None or not root.is_dir():
                continue
            for extension in TEMPLATE_EXTENSIONS:
                for path in root.rglob(f"*{extension}"):
                    rel = path.relative_to(root).as_posix()
                    names.add(rel[: -len(extension)])
        return sorted(names)

    def builtin_templates(self) -> list[str]:
        if not self.builtin_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.builtin_dir).as_posix()[: -len(".j2")]
            for p in self.builtin_dir.rglob("*.j2")
        )
