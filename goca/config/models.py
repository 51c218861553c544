"""Pydantic v2 models for the goca configuration document.

The model mirrors the ``.goca.yaml`` document: one top-level section per
concern, each a plain record with no back-references to its parent.

Enum-constrained settings are deliberately typed as plain ``str``.  An empty
string means "not chosen yet" and is filled by the default resolver; an
unknown value must survive loading so that the validator can report it as a
diagnostic instead of aborting the load.  The legal value sets live in the
``str`` enums below and are consumed by :mod:`goca.config.validator`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Value sets
# ---------------------------------------------------------------------------

class DatabaseType(str, Enum):
    """Supported database kinds."""
    POSTGRES = "postgres"
    MYSQL = "mysql"
    MONGODB = "mongodb"
    SQLITE = "sqlite"


class DIType(str, Enum):
    """Dependency-injection strategies."""
    MANUAL = "manual"
    WIRE = "wire"
    FX = "fx"
    DIG = "dig"


class NamingCase(str, Enum):
    """Identifier case styles usable in ``architecture.naming``."""
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    KEBAB = "kebab-case"
    UPPER = "UPPER_CASE"
    LOWER = "lowercase"


class TestFramework(str, Enum):
    """Test frameworks for generated tests."""
    __test__ = False  # keep pytest from collecting this enum

    TESTIFY = "testify"
    GINKGO = "ginkgo"
    BUILTIN = "builtin"


class AuthType(str, Enum):
    JWT = "jwt"
    OAUTH2 = "oauth2"
    SESSION = "session"
    BASIC = "basic"


class CacheType(str, Enum):
    REDIS = "redis"
    MEMCACHED = "memcached"
    INMEMORY = "inmemory"


class ValidationLibrary(str, Enum):
    BUILTIN = "builtin"
    VALIDATOR = "validator"
    OZZO = "ozzo-validation"


class MockTool(str, Enum):
    GOMOCK = "gomock"
    TESTIFY = "testify"
    COUNTERFEITER = "counterfeiter"


class FixtureFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    SQL = "sql"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    STRUCTURED = "structured"


class CommentLanguage(str, Enum):
    ENGLISH = "english"
    SPANISH = "spanish"


class CommentStyle(str, Enum):
    GODOC = "godoc"
    STANDARD = "standard"


# Database kinds that talk over the network and therefore need a port.
NETWORK_DATABASES: frozenset[str] = frozenset(
    {DatabaseType.POSTGRES.value, DatabaseType.MYSQL.value, DatabaseType.MONGODB.value}
)

DEFAULT_DATABASE_PORTS: dict[str, int] = {
    DatabaseType.POSTGRES.value: 5432,
    DatabaseType.MYSQL.value: 3306,
    DatabaseType.MONGODB.value: 27017,
    DatabaseType.SQLITE.value: 0,
}


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Section(BaseModel):
    """Base for every configuration record.

    Assignment is validated so that flag overlays are type-checked, and
    unknown document keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------

class ProjectConfig(Section):
    """Basic project metadata."""

    name: str = Field(default="", description="Project name (required)")
    module: str = Field(default="", description="Module path, e.g. 'github.com/user/project' (required)")
    description: str = ""
    version: str = ""
    author: str = ""
    license: str = ""
    repository: str = ""
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Architecture
# ---------------------------------------------------------------------------

class LayerConfig(Section):
    """One generated layer."""

    enabled: bool = False
    directory: str = ""
    patterns: list[str] = Field(default_factory=list)
    templates: list[str] = Field(default_factory=list)
    validations: list[str] = Field(default_factory=list)
    extensions: dict[str, str] = Field(default_factory=dict)


class LayersConfig(Section):
    domain: LayerConfig = Field(default_factory=LayerConfig)
    usecase: LayerConfig = Field(default_factory=LayerConfig)
    repository: LayerConfig = Field(default_factory=LayerConfig)
    handler: LayerConfig = Field(default_factory=LayerConfig)
    custom: list[LayerConfig] = Field(default_factory=list)


class DIConfig(Section):
    type: str = Field(default="", description="manual, wire, fx or dig")
    auto_wire: bool = False
    providers: list[str] = Field(default_factory=list)
    modules: list[str] = Field(default_factory=list)
    extensions: dict[str, str] = Field(default_factory=dict)


class NamingConfig(Section):
    """Case style per identifier class (values from :class:`NamingCase`)."""

    entities: str = ""
    fields: str = ""
    files: str = ""
    packages: str = ""
    constants: str = ""
    variables: str = ""
    functions: str = ""


class ArchitectureConfig(Section):
    layers: LayersConfig = Field(default_factory=LayersConfig)
    patterns: list[str] = Field(default_factory=list)
    di: DIConfig = Field(default_factory=DIConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

class MigrationConfig(Section):
    enabled: bool = False
    auto_generate: bool = False
    directory: str = ""
    naming: str = ""
    versioning: str = ""
    tools: list[str] = Field(default_factory=list)


class ConnectionConfig(Section):
    """Connection-pool tuning."""

    max_open: int = 0
    max_idle: int = 0
    max_lifetime: str = Field(default="", description="Duration string such as '5m'")
    ssl_mode: str = ""
    timezone: str = ""
    charset: str = ""
    collation: str = ""


class DatabaseFeatureConfig(Section):
    soft_delete: bool = False
    timestamps: bool = False
    uuid: bool = False
    audit: bool = False
    versioning: bool = False
    partitioning: bool = False
    indexes: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)


class DatabaseConfig(Section):
    type: str = Field(default="", description="postgres, mysql, mongodb or sqlite")
    host: str = ""
    port: int = Field(default=0, description="0 means unset, or no network transport")
    name: str = ""
    migrations: MigrationConfig = Field(default_factory=MigrationConfig)
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    features: DatabaseFeatureConfig = Field(default_factory=DatabaseFeatureConfig)
    extensions: list[str] = Field(default_factory=list)
    custom_types: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class ValidationConfig(Section):
    enabled: bool = False
    library: str = Field(default="", description="builtin, validator or ozzo-validation")
    tags: list[str] = Field(default_factory=list)
    custom: list[str] = Field(default_factory=list)
    sanitize: bool = False
    transform: bool = False


class BusinessRulesConfig(Section):
    enabled: bool = False
    patterns: list[str] = Field(default_factory=list)
    templates: list[str] = Field(default_factory=list)
    events: bool = False
    guards: bool = False


class SwaggerTag(Section):
    name: str = ""
    description: str = ""


class SwaggerConfig(Section):
    enabled: bool = False
    version: str = ""
    output: str = ""
    title: str = ""
    description: str = ""
    host: str = ""
    base_path: str = ""
    schemes: list[str] = Field(default_factory=list)
    tags: list[SwaggerTag] = Field(default_factory=list)
    extensions: dict[str, str] = Field(default_factory=dict)


class PostmanConfig(Section):
    enabled: bool = False
    output: str = ""
    environment: bool = False
    tests: bool = False
    variables: bool = False


class MarkdownConfig(Section):
    enabled: bool = False
    output: str = ""
    template: str = ""
    toc: bool = False
    examples: bool = False


class CommentsConfig(Section):
    enabled: bool = False
    language: str = ""
    style: str = ""
    examples: bool = False
    todo: bool = False
    deprecated: bool = False


class DocumentationConfig(Section):
    swagger: SwaggerConfig = Field(default_factory=SwaggerConfig)
    postman: PostmanConfig = Field(default_factory=PostmanConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)


class StyleConfig(Section):
    gofmt: bool = False
    goimports: bool = False
    golint: bool = False
    govet: bool = False
    staticcheck: bool = False
    custom: list[str] = Field(default_factory=list)
    line_length: int = 0
    tab_width: int = 0


class ImportAlias(Section):
    package: str = ""
    alias: str = ""


class ImportConfig(Section):
    group_standard: bool = False
    group_third_party: bool = False
    group_local: bool = False
    sort_alpha: bool = False
    remove_unused: bool = False
    aliases: list[ImportAlias] = Field(default_factory=list)


class GenerationConfig(Section):
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    business_rules: BusinessRulesConfig = Field(default_factory=BusinessRulesConfig)
    documentation: DocumentationConfig = Field(default_factory=DocumentationConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig)


# ---------------------------------------------------------------------------
# Testing
# ---------------------------------------------------------------------------

class CoverageConfig(Section):
    enabled: bool = False
    threshold: float = Field(default=0.0, description="Percentage in [0, 100]")
    output: str = ""
    format: str = ""
    exclude: list[str] = Field(default_factory=list)


class MockConfig(Section):
    enabled: bool = False
    tool: str = ""
    directory: str = ""
    suffix: str = ""
    interfaces: list[str] = Field(default_factory=list)


class FixtureConfig(Section):
    enabled: bool = False
    directory: str = ""
    format: str = ""
    seeds: bool = False
    factories: list[str] = Field(default_factory=list)


class TestingConfig(Section):
    __test__ = False

    enabled: bool = False
    framework: str = Field(default="", description="testify, ginkgo or builtin")
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    mocks: MockConfig = Field(default_factory=MockConfig)
    integration: bool = False
    benchmarks: bool = False
    examples: bool = False
    fixtures: FixtureConfig = Field(default_factory=FixtureConfig)


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------

class AuthConfig(Section):
    enabled: bool = False
    type: str = Field(default="", description="jwt, oauth2, session or basic")
    providers: list[str] = Field(default_factory=list)
    rbac: bool = False
    middleware: bool = False


class CacheConfig(Section):
    enabled: bool = False
    type: str = Field(default="", description="redis, memcached or inmemory")
    ttl: str = ""
    layers: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)


class LoggingConfig(Section):
    enabled: bool = False
    level: str = ""
    format: str = ""
    output: list[str] = Field(default_factory=list)
    structured: bool = False
    tracing: bool = False


class MonitoringConfig(Section):
    enabled: bool = False
    metrics: bool = False
    tracing: bool = False
    health_check: bool = False
    profiling: bool = False
    tools: list[str] = Field(default_factory=list)


class SecurityConfig(Section):
    https: bool = False
    cors: bool = False
    rate_limit: bool = False
    validation: bool = False
    sanitization: bool = False
    headers: list[str] = Field(default_factory=list)
    middleware: list[str] = Field(default_factory=list)


class PluginConfig(Section):
    name: str = ""
    version: str = ""
    enabled: bool = False
    config: dict[str, str] = Field(default_factory=dict)
    priority: int = 0


class FeatureConfig(Section):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    plugins: list[PluginConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Deploy (opaque to the engine)
# ---------------------------------------------------------------------------

class DockerConfig(Section):
    enabled: bool = False
    dockerfile: str = ""
    image: str = ""
    registry: str = ""
    compose: bool = False
    multistage: bool = False
    labels: dict[str, str] = Field(default_factory=dict)


class KubernetesConfig(Section):
    enabled: bool = False
    namespace: str = ""
    manifests: str = ""
    helm: bool = False
    ingress: bool = False
    config_maps: bool = False
    secrets: bool = False
    labels: dict[str, str] = Field(default_factory=dict)


class CIConfig(Section):
    enabled: bool = False
    provider: str = ""
    workflows: list[str] = Field(default_factory=list)
    tests: bool = False
    build: bool = False
    deploy: bool = False


class EnvironmentConfig(Section):
    name: str = ""
    default: bool = False
    variables: dict[str, str] = Field(default_factory=dict)
    overrides: dict[str, Any] = Field(default_factory=dict)


class DeployConfig(Section):
    docker: DockerConfig = Field(default_factory=DockerConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    ci: CIConfig = Field(default_factory=CIConfig)
    environments: list[EnvironmentConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TemplateConfig(Section):
    directory: str = Field(default="", description="User template override directory")
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Substitution variables available to every render call",
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

class GocaConfig(Section):
    """The complete configuration for one goca invocation."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    architecture: ArchitectureConfig = Field(default_factory=ArchitectureConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    testing: TestingConfig = Field(default_factory=TestingConfig)
    features: FeatureConfig = Field(default_factory=FeatureConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)


# ---------------------------------------------------------------------------
# Dotted-path helpers
# ---------------------------------------------------------------------------

def field_owner(model: BaseModel, path: str) -> tuple[BaseModel, str]:
    """Return the section holding the leaf of *path* and the leaf name."""
    *parents, leaf = path.split(".")
    target: Any = model
    for part in parents:
        if not isinstance(target, BaseModel) or part not in type(target).model_fields:
            raise AttributeError(f"Unknown configuration path: {path}")
        target = getattr(target, part)
    if not isinstance(target, BaseModel) or leaf not in type(target).model_fields:
        raise AttributeError(f"Unknown configuration path: {path}")
    return target, leaf


def get_path(model: BaseModel, path: str) -> Any:
    """Read the value at dotted *path*, e.g. ``get_path(cfg, "database.port")``."""
    owner, leaf = field_owner(model, path)
    return getattr(owner, leaf)


def set_path(model: BaseModel, path: str, value: Any) -> None:
    """Assign *value* at dotted *path* and mark the field as explicitly set."""
    owner, leaf = field_owner(model, path)
    setattr(owner, leaf, value)
    owner.model_fields_set.add(leaf)


def is_set(model: BaseModel, path: str) -> bool:
    """Whether the field at *path* was explicitly provided.

    Only the owning section is consulted: nested sections that were never
    mentioned are fresh instances with an empty fields-set.
    """
    owner, leaf = field_owner(model, path)
    return leaf in owner.model_fields_set
