"""
Naming Conventions
~~~~~~~~~~~~~~~~~~

Interprets the free-text naming conventions of a policy document
("PascalCase", "camelCase with use prefix", ...) and converts names
between them for rename suggestions.
"""

from __future__ import annotations

import re

__all__ = ["conforms", "convert", "split_words"]

_PATTERNS = {
    "pascal": re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    "camel": re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    "kebab": re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$"),
    "snake": re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$"),
    "screaming": re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$"),
}

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+")


def _style(convention: str) -> str | None:
    lowered = convention.lower()
    if "screaming" in lowered or "upper" in lowered or "constant" in lowered:
        return "screaming"
    if "pascal" in lowered:
        return "pascal"
    if "camel" in lowered:
        return "camel"
    if "kebab" in lowered:
        return "kebab"
    if "snake" in lowered:
        return "snake"
    return None


def _wants_use_prefix(convention: str) -> bool:
    return "use" in convention.lower().split()


def split_words(name: str) -> list[str]:
    """Split a name in any common case style into lowercase words."""
    return [w.lower() for w in _WORD_RE.findall(name)]


def conforms(name: str, convention: str) -> bool:
    """
    Return True if ``name`` follows ``convention``.

    Unknown conventions are not enforced.
    """
    if _wants_use_prefix(convention):
        if not name.startswith("use"):
            return False
        rest = name[3:]
        if rest and not rest[0].isupper():
            return False
    style = _style(convention)
    if style is None:
        return True
    return bool(_PATTERNS[style].match(name))


def convert(name: str, convention: str) -> str:
    """Convert ``name`` to ``convention``; returns it unchanged if unknown."""
    words = split_words(name) or [name]
    if _wants_use_prefix(convention) and words[0] != "use":
        words = ["use", *words]

    style = _style(convention)
    if style == "pascal":
        return "".join(w.capitalize() for w in words)
    if style == "camel":
        return words[0] + "".join(w.capitalize() for w in words[1:])
    if style == "kebab":
        return "-".join(words)
    if style == "snake":
        return "_".join(words)
    if style == "screaming":
        return "_".join(w.upper() for w in words)
    return name
