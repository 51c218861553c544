"""Entity and field definitions for generated constructs.

Fields are given on the command line as ``"name:type,price:float64"``.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, computed_field

from goca.errors import FieldSpecError
from goca.naming import to_pascal_case, to_snake_case


BASIC_FIELD_TYPES: tuple[str, ...] = (
    "string",
    "int",
    "int64",
    "uint",
    "uint64",
    "float32",
    "float64",
    "bool",
    "time.Time",
    "[]byte",
    "interface{}",
)

GO_KEYWORDS: frozenset[str] = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
        "map", "package", "range", "return", "select", "struct", "switch", "type",
        "var",
    }
)

# Predeclared identifiers, plus "id" which every entity already carries.
RESERVED_FIELD_NAMES: frozenset[str] = frozenset(
    {
        "id", "string", "int", "bool", "true", "false", "nil", "len", "cap",
        "make", "new", "delete", "copy", "append", "panic", "recover", "print",
        "println", "error",
    }
)

MAX_NAME_LENGTH = 50

_FIELD_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")
_ENTITY_NAME_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_MAP_TYPE_RE = re.compile(r"^map\[[a-zA-Z0-9_.*\[\]]+\][a-zA-Z0-9_.*\[\]{}]+$")


class FieldSpec(BaseModel):
    """One entity field."""

    name: str = Field(..., description="Field name as given, e.g. 'created_at'")
    type: str = Field(..., description="Go type, e.g. 'string' or '[]int'")

    @computed_field  # type: ignore[misc]
    @property
    def go_name(self) -> str:
        """Exported identifier, e.g. ``CreatedAt``."""
        return to_pascal_case(self.name)

    @computed_field  # type: ignore[misc]
    @property
    def json_name(self) -> str:
        return to_snake_case(self.name)

    @computed_field  # type: ignore[misc]
    @property
    def gorm_tag(self) -> str:
        name = self.go_name
        if self.type == "string":
            if name == "Email":
                return "type:varchar(255);uniqueIndex;not null"
            if name in ("Title", "Name"):
                return "type:varchar(255);not null"
            if name == "Description":
                return "type:text"
            return "type:varchar(255)"
        if self.type == "int":
            return "type:integer;not null;default:0"
        if self.type == "bool":
            return "type:boolean;not null;default:false"
        if self.type == "float64":
            return "type:decimal(10,2);not null;default:0"
        return "not null"


def is_valid_field_type(field_type: str) -> bool:
    """Basic types, and slices, pointers and maps built from them."""
    if field_type in BASIC_FIELD_TYPES:
        return True
    if field_type.startswith("[]"):
        return is_valid_field_type(field_type[2:])
    if field_type.startswith("*"):
        return is_valid_field_type(field_type[1:])
    if field_type.startswith("map["):
        return bool(_MAP_TYPE_RE.match(field_type))
    return False


def validate_entity_name(name: str) -> str:
    """Entity names are PascalCase identifiers of at most 50 characters.

    Raises:
        FieldSpecError: If *name* is empty, too long or malformed.
    """
    if not name:
        raise FieldSpecError("entity name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise FieldSpecError(
            f"entity name must be at most {MAX_NAME_LENGTH} characters: {name}"
        )
    if not _ENTITY_NAME_RE.match(name):
        raise FieldSpecError(
            f"entity name must start with an upper-case letter and contain "
            f"only letters and digits: {name}"
        )
    return name


def parse_field(definition: str) -> FieldSpec:
    """Parse one ``name:type`` pair."""
    parts = definition.split(":")
    if len(parts) != 2:
        raise FieldSpecError(
            f"invalid field definition '{definition}'; expected 'name:type'"
        )
    name, field_type = (part.strip() for part in parts)

    if not name:
        raise FieldSpecError(f"field name cannot be empty in '{definition}'")
    if len(name) > MAX_NAME_LENGTH:
        raise FieldSpecError(
            f"field name must be at most {MAX_NAME_LENGTH} characters: {name}"
        )
    if not _FIELD_NAME_RE.match(name):
        raise FieldSpecError(
            f"field name must start with a letter and contain only letters, "
            f"digits and underscores: {name}"
        )
    if not field_type:
        raise FieldSpecError(f"field type cannot be empty for '{name}'")
    if not is_valid_field_type(field_type):
        raise FieldSpecError(
            f"invalid field type '{field_type}'. Valid types: "
            f"{', '.join(BASIC_FIELD_TYPES)}"
        )

    lowered = name.lower()
    if lowered in GO_KEYWORDS:
        raise FieldSpecError(f"'{name}' is a Go reserved word")
    if lowered in RESERVED_FIELD_NAMES:
        raise FieldSpecError(f"'{name}' may cause conflicts; use a different name")
    return FieldSpec(name=name, type=field_type)


def parse_fields(spec: str) -> list[FieldSpec]:
    """Parse ``"name:string,price:float64"`` into field definitions.

    Raises:
        FieldSpecError: On an empty list, a malformed pair, an invalid type, a
            reserved name, or two fields with the same exported name.
    """
    if not spec.strip():
        raise FieldSpecError("no fields given; expected 'name:type,...'")

    fields: list[FieldSpec] = []
    seen: set[str] = set()
    for definition in spec.split(","):
        field = parse_field(definition.strip())
        if field.go_name in seen:
            raise FieldSpecError(f"duplicate field: {field.name}")
        seen.add(field.go_name)
        fields.append(field)
    return fields
