"""
Import Specifiers
~~~~~~~~~~~~~~~~~

Extraction and classification of import specifiers in script content.
Shared by the import validity check and the policy evaluator.
"""

from __future__ import annotations

import re

__all__ = [
    "BUILTIN_PREFIX",
    "extract_imports",
    "is_builtin",
    "is_external",
    "package_root",
]

BUILTIN_PREFIX = "node:"

_IMPORT_PATTERNS = (
    # import x from 'y' / import 'y' / import type { T } from 'y'
    re.compile(r"""import\s+(?:[\w$\s{},*]+\s+from\s+)?['"]([^'"]+)['"]"""),
    # import('y')
    re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    # require('y')
    re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
)


def extract_imports(code: str) -> list[str]:
    """
    Extract distinct import specifiers in first-seen order.

    Recognises static imports, dynamic ``import()`` calls and
    ``require()`` calls with a string-literal argument.
    """
    found: list[tuple[int, str]] = []
    for pattern in _IMPORT_PATTERNS:
        for match in pattern.finditer(code):
            found.append((match.start(1), match.group(1)))
    found.sort(key=lambda item: item[0])
    return list(dict.fromkeys(specifier for _, specifier in found))


def is_builtin(specifier: str) -> bool:
    return specifier.startswith(BUILTIN_PREFIX)


def is_external(specifier: str) -> bool:
    """Return True for bare package specifiers."""
    return not is_builtin(specifier) and not specifier.startswith((".", "/"))


def package_root(specifier: str) -> str:
    """Collapse a package specifier to its root (``@scope/name`` or ``name``)."""
    parts = specifier.split("/")
    if specifier.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]
