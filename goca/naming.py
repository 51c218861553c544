"""Identifier case conversion helpers.

Pure functions over a single string.  They are exposed to templates by
:class:`~goca.scaffolder.templates.TemplateRenderer` and used to derive file
and identifier names from one canonical construct name, according to the
conventions configured in ``architecture.naming``.
"""

from __future__ import annotations

import re
from typing import Callable

# Runs of letters and digits; everything else (``_ - space .``) separates.
_RUN_RE = re.compile(r"[^\W_]+")


def _split_run(run: str) -> list[str]:
    """Split one alphanumeric run on case changes.

    A new word starts at an upper-case letter that follows a lower-case
    letter or digit (``orderItem``), or that ends an acronym (``HTTPServer``).
    Works on any cased script, so ``CaféUser`` gives ``Café``, ``User``.
    """
    words: list[str] = []
    start = 0
    for i in range(1, len(run)):
        char = run[i]
        if not char.isupper():
            continue
        prev = run[i - 1]
        following = run[i + 1] if i + 1 < len(run) else ""
        if not prev.isupper() or following.islower():
            words.append(run[start:i])
            start = i
    words.append(run[start:])
    return words


def split_words(value: str) -> list[str]:
    """Split an identifier on separators (``_ - space .``) and case changes."""
    return [word for run in _RUN_RE.findall(value) for word in _split_run(run)]


def to_pascal_case(value: str) -> str:
    """``user_name`` / ``user-name`` / ``userName`` -> ``UserName``."""
    return "".join(word.capitalize() for word in split_words(value))


def to_camel_case(value: str) -> str:
    """``user_name`` / ``UserName`` -> ``userName``."""
    words = split_words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def to_snake_case(value: str) -> str:
    """``UserName`` / ``user-name`` -> ``user_name``."""
    return "_".join(word.lower() for word in split_words(value))


def to_kebab_case(value: str) -> str:
    """``UserName`` / ``user_name`` -> ``user-name``."""
    return "-".join(word.lower() for word in split_words(value))


def to_upper_case(value: str) -> str:
    """``UserName`` -> ``USER_NAME`` (constant style)."""
    return "_".join(word.upper() for word in split_words(value))


def to_lower_case(value: str) -> str:
    """``UserName`` -> ``username`` (package style)."""
    return "".join(word.lower() for word in split_words(value))


def to_title(value: str) -> str:
    """Upper-case the first character and lower-case the rest."""
    if not value:
        return value
    return value[:1].upper() + value[1:].lower()


def pluralize(value: str) -> str:
    """Naive English pluralisation, good enough for entity names."""
    if not value:
        return ""
    lower = value.lower()
    if lower.endswith("y") and len(value) > 1 and lower[-2] not in "aeiou":
        return value[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"


def singularize(value: str) -> str:
    """Inverse of :func:`pluralize` for the common cases."""
    if not value:
        return ""
    lower = value.lower()
    if lower.endswith("ies") and len(value) > 3:
        return value[:-3] + "y"
    if lower.endswith(("ses", "xes", "zes", "ches", "shes")):
        return value[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return value[:-1]
    return value


# Keyed by the ``architecture.naming`` value-set (see goca.config.models.NamingCase).
CONVENTIONS: dict[str, Callable[[str], str]] = {
    "PascalCase": to_pascal_case,
    "camelCase": to_camel_case,
    "snake_case": to_snake_case,
    "kebab-case": to_kebab_case,
    "UPPER_CASE": to_upper_case,
    "lowercase": to_lower_case,
}


def apply_convention(value: str, convention: str) -> str:
    """Render *value* in the named case style.

    Raises:
        ValueError: If *convention* is not one of :data:`CONVENTIONS`.
    """
    try:
        converter = CONVENTIONS[convention]
    except KeyError:
        raise ValueError(
            f"Unknown naming convention '{convention}'. "
            f"Options: {', '.join(CONVENTIONS)}"
        ) from None
    return converter(value)
