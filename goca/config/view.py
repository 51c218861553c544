"""Read-only views over a resolved configuration.

Once a configuration has been validated it is handed to later stages
(template rendering, file writing) only through :class:`ConfigView`, which
refuses assignment at every level of the tree.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel


def _freeze(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return ConfigView(value)
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


class ConfigView:
    """Immutable attribute-access proxy for a pydantic model.

    The wrapped model is a private deep copy, so neither the view nor the
    original can be used to change the other.
    """

    __slots__ = ("_model",)

    def __init__(self, model: BaseModel) -> None:
        object.__setattr__(self, "_model", model.model_copy(deep=True))

    def __getattr__(self, name: str) -> Any:
        model = object.__getattribute__(self, "_model")
        if name not in type(model).model_fields:
            raise AttributeError(name)
        return _freeze(getattr(model, name))

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError(f"Configuration is read-only (tried to set '{name}')")

    def __delattr__(self, name: str) -> None:
        raise TypeError(f"Configuration is read-only (tried to delete '{name}')")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConfigView):
            return self.model_dump() == other.model_dump()
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        model = object.__getattribute__(self, "_model")
        return f"ConfigView({type(model).__name__})"

    def get(self, path: str) -> Any:
        """Read a dotted path, e.g. ``view.get("database.port")``."""
        target: Any = self
        for part in path.split("."):
            target = getattr(target, part)
        return target

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        """Plain-dict copy of the underlying data."""
        return object.__getattribute__(self, "_model").model_dump(**kwargs)

    def to_model(self) -> BaseModel:
        """A fresh, mutable deep copy of the underlying model."""
        return object.__getattribute__(self, "_model").model_copy(deep=True)
