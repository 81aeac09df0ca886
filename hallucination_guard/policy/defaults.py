"""
Default Policy
~~~~~~~~~~~~~~

Baseline policy document that loaded policy files are merged onto.
"""

from __future__ import annotations

__all__ = ["DEFAULT_POLICY"]

DEFAULT_POLICY: dict = {
    "version": "1.0",
    "project": {
        "name": "unnamed-project",
        "type": "generic",
    },
    "techStack": {
        "framework": "react",
        "version": "^18.0.0",
        "language": "typescript",
        "forbiddenPackages": [],
    },
    "directoryStructure": {},
    "moduleBoundaries": [],
    "namingConventions": {
        "components": "PascalCase",
        "hooks": "camelCase with use prefix",
        "utils": "camelCase",
        "constants": "SCREAMING_SNAKE_CASE",
        "types": "PascalCase",
    },
    "codeQuality": {
        "maxFunctionLines": 50,
        "maxFileLines": 300,
        "maxParameters": 4,
        "requireJsdoc": False,
        "forbiddenPatterns": [],
    },
    "modificationRules": {
        "protectedFiles": [],
        "protectedDirectories": ["node_modules", ".git"],
        "requireApproval": [],
    },
}
