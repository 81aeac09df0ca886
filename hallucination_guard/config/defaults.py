"""
Default Configuration
~~~~~~~~~~~~~~~~~~~~~

Defaults merged under every loaded configuration.
"""

from __future__ import annotations

__all__ = ["DEFAULT_CONFIG"]

DEFAULT_CONFIG: dict = {
    "project_root": ".",
    "enabled_checks": {
        "file_existence": True,
        "import_validity": True,
        "syntax_validity": True,
        "policy_compliance": True,
    },
    "dependency_dir": "node_modules",
    "manifest_file": "package.json",
}
