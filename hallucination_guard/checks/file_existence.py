"""
File Existence Check
~~~~~~~~~~~~~~~~~~~~

Resolves a project-relative path safely and verifies the file exists
(or, for creations, that it does not yet exist).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult
from hallucination_guard.core.severity import CheckKind

__all__ = [
    "FileExistenceCheck",
    "resolve_within_root",
    "check_file_existence",
    "check_files_existence",
]

logger = logging.getLogger(__name__)


def resolve_within_root(path: str, project_root: str) -> str | None:
    """
    Resolve ``path`` against ``project_root``.

    Symlinks are followed, so a link pointing outside the root is
    rejected as well as ``..`` escapes.

    Returns:
        The absolute path, or None if it falls outside the root.
    """
    root = os.path.realpath(project_root)
    full = os.path.realpath(os.path.join(root, path))
    if os.path.commonpath([root, full]) != root:
        return None
    return full


def _probe(full_path: str) -> dict[str, Any]:
    if not os.path.exists(full_path):
        return {"exists": False}
    return {
        "exists": True,
        "is_file": os.path.isfile(full_path),
        "is_directory": os.path.isdir(full_path),
    }


async def check_file_existence(
    path: str,
    project_root: str,
    should_exist: bool = True,
) -> CheckResult:
    """
    Check a single path against the filesystem.

    Args:
        path: Project-relative path.
        project_root: Absolute project root.
        should_exist: Whether the caller expects the file to exist.

    Returns:
        BLOCK for paths escaping the root, missing files that should
        exist, and directories or unreadable entries; WARN for files that
        exist but should not; INFO otherwise.
    """
    kind = CheckKind.FILE_EXISTENCE

    try:
        full_path = resolve_within_root(path, project_root)
        if full_path is None:
            return CheckResult.block(
                kind,
                f'Security violation: Path "{path}" is outside project root',
                details={"path": path, "project_root": project_root},
            )
        probe = await asyncio.to_thread(_probe, full_path)
    except (OSError, ValueError) as exc:
        logger.error("Probe of %r failed: %s", path, exc)
        return CheckResult.block(
            kind,
            f'Cannot access "{path}": {exc}',
            details={"path": path, "error": str(exc)},
        )

    if should_exist and not probe["exists"]:
        return CheckResult.block(
            kind,
            f'Hallucination detected: File "{path}" does not exist',
            details={"path": path, "exists": False},
        )

    if not should_exist and probe["exists"]:
        return CheckResult.warn(
            kind,
            f'File "{path}" already exists',
            details={"path": path, "exists": True},
            passed=False,
        )

    if probe["exists"] and not probe["is_file"]:
        return CheckResult.block(
            kind,
            f'"{path}" exists but is not a file',
            details={
                "path": path,
                "is_file": False,
                "is_directory": probe["is_directory"],
            },
        )

    return CheckResult.ok(
        kind,
        f'File "{path}" exists'
        if should_exist
        else f'File "{path}" does not exist (as expected)',
    )


async def check_files_existence(
    paths: list[str],
    project_root: str,
    should_exist: bool = True,
) -> list[CheckResult]:
    """Check many paths concurrently; results keep input order."""
    return list(
        await asyncio.gather(
            *(check_file_existence(p, project_root, should_exist) for p in paths)
        )
    )


class FileExistenceCheck(BaseCheck):
    """Runs whenever an action names a target path."""

    @property
    def kind(self) -> CheckKind:
        return CheckKind.FILE_EXISTENCE

    def applies_to(self, action: AgentAction, config: GuardConfig) -> bool:
        return bool(action.target_path)

    async def _run(
        self, action: AgentAction, config: GuardConfig
    ) -> list[CheckResult]:
        result = await check_file_existence(
            action.target_path or "",
            config.project_root,
            should_exist=action.kind.requires_existing_target(),
        )
        return [result]
