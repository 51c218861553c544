"""Unit tests for the default resolver (goca.config.defaults).

Tests cover:
- Static defaults: filling, presence tracking, empty-string handling
- Each derived rule and the warning it records
- Purity and idempotence of resolve_defaults
- rederive after flag overrides
- create_default_config
"""

from __future__ import annotations

import pytest

from goca.config.defaults import (
    DERIVED_RULES,
    STATIC_DEFAULTS,
    DerivedRule,
    apply_static_defaults,
    create_default_config,
    rederive,
    resolve_defaults,
)
from goca.config.diagnostics import Severity
from goca.config.loader import parse_config_text
from goca.config.models import GocaConfig, get_path, is_set, set_path


pytestmark = pytest.mark.unit


def _config(text: str) -> GocaConfig:
    return parse_config_text(text)


def _warning_fields(resolution) -> list[str]:
    return [w.field for w in resolution.warnings]


# ---------------------------------------------------------------------------
# Static defaults
# ---------------------------------------------------------------------------


class TestStaticDefaults:
    def test_every_path_is_filled(self):
        config = GocaConfig()
        apply_static_defaults(config)
        for path, value in STATIC_DEFAULTS.items():
            assert get_path(config, path) == value, path

    def test_defaults_are_not_marked_as_set(self):
        config = GocaConfig()
        apply_static_defaults(config)
        assert not is_set(config, "database.type")
        assert not is_set(config, "testing.coverage.threshold")

    def test_user_values_are_kept(self):
        config = _config("database:\n  type: mysql\ntesting:\n  framework: ginkgo\n")
        apply_static_defaults(config)
        assert config.database.type == "mysql"
        assert config.testing.framework == "ginkgo"

    def test_empty_string_counts_as_unset(self):
        config = _config("database:\n  type: ''\n")
        apply_static_defaults(config)
        assert config.database.type == "postgres"

    def test_explicit_false_is_kept(self):
        config = _config("architecture:\n  layers:\n    usecase:\n      enabled: false\n")
        apply_static_defaults(config)
        assert config.architecture.layers.usecase.enabled is False
        assert config.architecture.layers.domain.enabled is True

    def test_static_defaults_are_silent(self):
        resolution = resolve_defaults(GocaConfig())
        assert "database.type" not in _warning_fields(resolution)
        assert "testing.framework" not in _warning_fields(resolution)


# ---------------------------------------------------------------------------
# Derived defaults
# ---------------------------------------------------------------------------


class TestDerivedDefaults:
    @pytest.mark.parametrize(
        ("database", "port"),
        [("postgres", 5432), ("mysql", 3306), ("mongodb", 27017)],
    )
    def test_port_from_database_type(self, database: str, port: int):
        resolution = resolve_defaults(_config(f"database:\n  type: {database}\n"))
        assert resolution.config.database.port == port
        assert resolution.derived["database.port"] == port

    def test_mongodb_port_warns_exactly_once(self):
        resolution = resolve_defaults(_config("database:\n  type: mongodb\n"))
        port_warnings = [w for w in resolution.warnings if w.field == "database.port"]
        assert len(port_warnings) == 1
        warning = port_warnings[0]
        assert warning.severity is Severity.WARNING
        assert warning.value == 27017
        assert "27017" in warning.message

    def test_port_derived_for_default_database(self):
        resolution = resolve_defaults(GocaConfig())
        assert resolution.config.database.type == "postgres"
        assert resolution.config.database.port == 5432

    def test_explicit_port_wins(self):
        resolution = resolve_defaults(_config("database:\n  type: mysql\n  port: 3307\n"))
        assert resolution.config.database.port == 3307
        assert "database.port" not in _warning_fields(resolution)

    def test_sqlite_keeps_port_zero_silently(self):
        resolution = resolve_defaults(_config("database:\n  type: sqlite\n"))
        assert resolution.config.database.port == 0
        assert "database.port" not in _warning_fields(resolution)

    def test_unknown_database_gets_no_port(self):
        resolution = resolve_defaults(_config("database:\n  type: oracle\n"))
        assert resolution.config.database.port == 0
        assert "database.port" not in resolution.derived

    def test_mysql_charset(self):
        resolution = resolve_defaults(_config("database:\n  type: mysql\n"))
        assert resolution.config.database.connection.charset == "utf8mb4"
        assert "database.connection.charset" in _warning_fields(resolution)

    def test_postgres_has_no_charset(self):
        resolution = resolve_defaults(GocaConfig())
        assert resolution.config.database.connection.charset == ""

    def test_database_name_from_project(self):
        resolution = resolve_defaults(_config("project:\n  name: My Shop\n"))
        assert resolution.config.database.name == "my_shop"

    def test_database_name_keeps_accented_letters(self):
        resolution = resolve_defaults(_config("project:\n  name: CaféShop\n"))
        assert resolution.config.database.name == "café_shop"

    def test_no_database_name_without_project_name(self):
        resolution = resolve_defaults(GocaConfig())
        assert resolution.config.database.name == ""
        assert "database.name" not in resolution.derived

    def test_rate_limit_follows_auth(self):
        resolution = resolve_defaults(_config("features:\n  auth:\n    enabled: true\n"))
        assert resolution.config.features.security.rate_limit is True
        assert "features.security.rate_limit" in _warning_fields(resolution)

    def test_explicit_rate_limit_is_respected(self):
        resolution = resolve_defaults(
            _config(
                "features:\n  auth:\n    enabled: true\n"
                "  security:\n    rate_limit: false\n"
            )
        )
        assert resolution.config.features.security.rate_limit is False
        assert "features.security.rate_limit" not in resolution.derived

    def test_swagger_title(self):
        resolution = resolve_defaults(
            _config(
                "project:\n  name: shop\n"
                "generation:\n  documentation:\n    swagger:\n      enabled: true\n"
            )
        )
        assert resolution.config.generation.documentation.swagger.title == "shop API"

    def test_warning_names_field_and_value(self):
        resolution = resolve_defaults(_config("database:\n  type: mysql\n"))
        warning = next(w for w in resolution.warnings if w.field == "database.port")
        assert warning.message.startswith("database.port not set; using 3306")

    def test_derived_values_are_not_marked_as_set(self):
        resolution = resolve_defaults(_config("database:\n  type: mysql\n"))
        assert not is_set(resolution.config, "database.port")

    def test_custom_rules(self):
        rule = DerivedRule(
            target="project.description",
            depends_on=("project.name",),
            applies=lambda cfg: cfg.project.description == "",
            compute=lambda cfg: f"The {cfg.project.name} service",
            reason="described after the project",
        )
        resolution = resolve_defaults(_config("project:\n  name: shop\n"), rules=[rule])
        assert resolution.config.project.description == "The shop service"
        assert _warning_fields(resolution) == ["project.description"]

    def test_rule_targets_are_unique(self):
        targets = [rule.target for rule in DERIVED_RULES]
        assert len(targets) == len(set(targets))


# ---------------------------------------------------------------------------
# Purity
# ---------------------------------------------------------------------------


class TestResolvePurity:
    def test_input_is_not_mutated(self):
        config = _config("database:\n  type: mysql\n")
        before = config.model_dump()
        resolve_defaults(config)
        assert config.model_dump() == before

    def test_same_input_same_output(self):
        config = _config("project:\n  name: shop\ndatabase:\n  type: mongodb\n")
        first = resolve_defaults(config)
        second = resolve_defaults(config)
        assert first.config.model_dump() == second.config.model_dump()
        assert first.warnings == second.warnings

    def test_resolving_resolved_config_is_a_no_op(self):
        first = resolve_defaults(_config("project:\n  name: shop\ndatabase:\n  type: mysql\n"))
        second = resolve_defaults(first.config)
        assert second.config.model_dump() == first.config.model_dump()
        assert second.warnings == []


# ---------------------------------------------------------------------------
# Re-derivation
# ---------------------------------------------------------------------------


class TestRederive:
    def _override(self, resolution, path: str, value):
        config = resolution.config.model_copy(deep=True)
        set_path(config, path, value)
        return resolution.model_copy(update={"config": config})

    def test_database_change_recomputes_port(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        assert resolution.config.database.port == 3306

        updated = rederive(
            self._override(resolution, "database.type", "postgres"), ["database.type"]
        )
        assert updated.config.database.port == 5432
        assert updated.derived["database.port"] == 5432

    def test_stale_derived_value_is_dropped(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        updated = rederive(
            self._override(resolution, "database.type", "postgres"), ["database.type"]
        )
        assert updated.config.database.connection.charset == ""
        assert "database.connection.charset" not in updated.derived
        assert "database.connection.charset" not in _warning_fields(updated)

    def test_port_warning_is_replaced(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        updated = rederive(
            self._override(resolution, "database.type", "mongodb"), ["database.type"]
        )
        port_warnings = [w for w in updated.warnings if w.field == "database.port"]
        assert len(port_warnings) == 1
        assert port_warnings[0].value == 27017

    def test_overridden_target_is_no_longer_derived(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        updated = rederive(self._override(resolution, "database.port", 0), ["database.port"])
        assert updated.config.database.port == 0
        assert "database.port" not in updated.derived
        assert "database.port" not in _warning_fields(updated)

    def test_explicit_file_value_survives(self):
        resolution = resolve_defaults(_config("database:\n  type: mysql\n  port: 3307\n"))
        updated = rederive(
            self._override(resolution, "database.type", "postgres"), ["database.type"]
        )
        assert updated.config.database.port == 3307

    def test_project_rename_renames_database(self):
        resolution = resolve_defaults(_config("project:\n  name: shop\n"))
        updated = rederive(
            self._override(resolution, "project.name", "Order Service"), ["project.name"]
        )
        assert updated.config.database.name == "order_service"

    def test_unrelated_change_keeps_everything(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        updated = rederive(
            self._override(resolution, "testing.framework", "ginkgo"), ["testing.framework"]
        )
        assert updated.derived == resolution.derived
        assert updated.warnings == resolution.warnings

    def test_no_changes(self, mysql_config_text: str):
        resolution = resolve_defaults(_config(mysql_config_text))
        updated = rederive(resolution, [])
        assert updated.config.model_dump() == resolution.config.model_dump()


# ---------------------------------------------------------------------------
# create_default_config
# ---------------------------------------------------------------------------


class TestCreateDefaultConfig:
    def test_named_project(self, default_config: GocaConfig):
        assert default_config.project.name == "shop"
        assert default_config.project.module == "github.com/acme/shop"
        assert default_config.project.version == "1.0.0"
        assert default_config.database.type == "postgres"
        assert default_config.database.port == 5432
        assert default_config.database.name == "shop"

    def test_path_uses_final_component(self):
        config = create_default_config("/home/dev/projects/inventory")
        assert config.project.name == "inventory"

    def test_module_falls_back_to_name(self):
        config = create_default_config("inventory")
        assert config.project.module == "inventory"
