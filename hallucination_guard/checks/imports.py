"""
Import Validity Check
~~~~~~~~~~~~~~~~~~~~~

Extracts import specifiers from proposed script content and verifies
that each one resolves: platform builtins are trusted, external packages
must be installed or declared in the manifest, and relative imports must
hit a file on disk.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult
from hallucination_guard.core.severity import CheckKind
from hallucination_guard.core.specifiers import (
    BUILTIN_PREFIX,
    extract_imports,
    is_builtin,
    is_external,
    package_root,
)

__all__ = [
    "ImportValidityCheck",
    "BUILTIN_PREFIX",
    "SOURCE_EXTENSIONS",
    "extract_imports",
    "is_builtin",
    "is_external",
    "package_root",
    "candidate_paths",
    "check_import_validity",
    "check_all_imports",
]

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".json", ".mjs", ".cjs")

_MANIFEST_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


def candidate_paths(specifier: str, source_dir: str) -> list[str]:
    """
    Return every path a relative import may resolve to, in lookup order.

    The literal path first, then each source extension appended, then an
    ``index`` file with each extension inside the path as a directory.
    """
    base = os.path.normpath(os.path.join(source_dir, specifier))
    paths = [base]
    paths.extend(base + ext for ext in SOURCE_EXTENSIONS)
    paths.extend(os.path.join(base, f"index{ext}") for ext in SOURCE_EXTENSIONS)
    return paths


# ── Filesystem Lookups ───────────────────────────────────────────────────────


def _declared_packages(manifest_path: str) -> set[str]:
    """
    Read declared package names from the manifest.

    An unreadable or malformed manifest declares nothing: an unverifiable
    package is reported missing rather than trusted.
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            manifest = json.load(f)
    except (OSError, ValueError) as exc:
        logger.debug("Cannot read manifest %s: %s", manifest_path, exc)
        return set()

    if not isinstance(manifest, dict):
        return set()

    declared: set[str] = set()
    for section in _MANIFEST_SECTIONS:
        deps = manifest.get(section)
        if isinstance(deps, dict):
            declared.update(deps)
    return declared


def _package_exists(
    root: str,
    project_root: str,
    dependency_dir: str,
    manifest_file: str,
) -> bool:
    if os.path.isdir(os.path.join(project_root, dependency_dir, root)):
        return True
    manifest_path = os.path.join(project_root, manifest_file)
    if not os.path.exists(manifest_path):
        return False
    return root in _declared_packages(manifest_path)


def _first_existing(paths: list[str]) -> str | None:
    for path in paths:
        if os.path.exists(path):
            return path
    return None


# ── Checks ───────────────────────────────────────────────────────────────────


async def check_import_validity(
    specifier: str,
    source_file_path: str,
    project_root: str,
    dependency_dir: str = "node_modules",
    manifest_file: str = "package.json",
) -> CheckResult:
    """
    Resolve one import specifier.

    Args:
        specifier: The import specifier as written in source.
        source_file_path: Project-relative path of the importing file.
        project_root: Absolute project root.
        dependency_dir: Package install directory under the root.
        manifest_file: Dependency manifest under the root.

    Returns:
        INFO when resolved, BLOCK when the import cannot be found or the
        lookup itself fails.
    """
    kind = CheckKind.IMPORT_VALIDITY

    if is_builtin(specifier):
        return CheckResult.ok(kind, f"Built-in module: {specifier}")

    try:
        if is_external(specifier):
            root = package_root(specifier)
            installed = await asyncio.to_thread(
                _package_exists, root, project_root, dependency_dir, manifest_file
            )
            if not installed:
                return CheckResult.block(
                    kind,
                    f'Hallucination detected: Package "{specifier}" is not installed',
                    details={
                        "import_path": specifier,
                        "package": root,
                        "type": "external_package",
                    },
                )
            return CheckResult.ok(kind, f"External package: {specifier}")

        source_dir = os.path.dirname(os.path.join(project_root, source_file_path))
        tried = candidate_paths(specifier, source_dir)
        hit = await asyncio.to_thread(_first_existing, tried)
    except OSError as exc:
        logger.error("Import lookup for %r failed: %s", specifier, exc)
        return CheckResult.block(
            kind,
            f'Cannot resolve import "{specifier}": {exc}',
            details={"import_path": specifier, "error": str(exc)},
        )

    if hit is None:
        return CheckResult.block(
            kind,
            f'Hallucination detected: Cannot resolve import "{specifier}" '
            f'from "{source_file_path}"',
            details={
                "import_path": specifier,
                "source_file_path": source_file_path,
                "tried_paths": tried,
            },
        )

    logger.debug("Resolved import %r to %s", specifier, hit)
    return CheckResult.ok(kind, f"Local import resolved: {specifier}")


async def check_all_imports(
    code: str,
    source_file_path: str,
    project_root: str,
    dependency_dir: str = "node_modules",
    manifest_file: str = "package.json",
    imports: list[str] | tuple[str, ...] | None = None,
) -> list[CheckResult]:
    """
    Resolve every import in ``code`` concurrently.

    One result per distinct specifier, in the order the specifiers were
    first seen. ``imports`` overrides extraction when the caller already
    knows the list.
    """
    specifiers = (
        list(dict.fromkeys(imports)) if imports is not None else extract_imports(code)
    )
    return list(
        await asyncio.gather(
            *(
                check_import_validity(
                    specifier,
                    source_file_path,
                    project_root,
                    dependency_dir=dependency_dir,
                    manifest_file=manifest_file,
                )
                for specifier in specifiers
            )
        )
    )


class ImportValidityCheck(BaseCheck):
    """Runs when an action carries content, a target path and imports."""

    @property
    def kind(self) -> CheckKind:
        return CheckKind.IMPORT_VALIDITY

    def applies_to(self, action: AgentAction, config: GuardConfig) -> bool:
        if not action.content or not action.target_path:
            return False
        imports = (
            action.imports
            if action.imports is not None
            else extract_imports(action.content)
        )
        return len(imports) > 0

    async def _run(
        self, action: AgentAction, config: GuardConfig
    ) -> list[CheckResult]:
        return await check_all_imports(
            action.content or "",
            action.target_path or "",
            config.project_root,
            dependency_dir=config.dependency_dir,
            manifest_file=config.manifest_file,
            imports=action.imports,
        )
