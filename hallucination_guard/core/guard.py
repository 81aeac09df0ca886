"""
HallucinationGuard — Main Guard Class
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

The primary entry point for HallucinationGuard. Composes the four check
engines, runs the ones that apply to an action concurrently, and
aggregates their results into one ValidationResult.

Configuration is copy-on-read: every validation takes a snapshot of the
current GuardConfig at entry, and ``set_check_enabled()`` /
``update_policy()`` swap in a new frozen config under a lock. In-flight
validations never observe a change.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine, Sequence
from typing import Any, TypeVar

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.checks.compliance import PolicyComplianceCheck
from hallucination_guard.checks.file_existence import (
    FileExistenceCheck,
    check_file_existence,
)
from hallucination_guard.checks.imports import ImportValidityCheck, check_all_imports
from hallucination_guard.checks.syntax import (
    SyntaxValidityCheck,
    check_syntax_validity,
)
from hallucination_guard.config.loader import load_config
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult, ValidationResult
from hallucination_guard.core.report import render_report
from hallucination_guard.core.severity import CheckKind, Language
from hallucination_guard.exceptions import ActionBlockedError, ApprovalRequiredError
from hallucination_guard.observability.listeners import ValidationListeners
from hallucination_guard.policy.schema import PolicyDocument

__all__ = ["HallucinationGuard"]

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _run_sync(coro: Coroutine[Any, Any, _T]) -> _T:
    """Run a coroutine to completion from synchronous code."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    # Called from inside a running loop: use a private loop on a worker thread.
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


class HallucinationGuard:
    """
    Validates agent actions against the filesystem, the dependency
    manifest, the literal syntax of proposed content and the project
    policy, before the action is applied.

    Example::

        guard = HallucinationGuard.default("/path/to/project")
        result = guard.validate(
            AgentAction(kind="create", target_path="src/a.ts", content="...")
        )
        if not result.passed:
            print(result.blocking_reasons)
    """

    def __init__(
        self,
        config: GuardConfig,
        listeners: ValidationListeners | None = None,
        checks: Sequence[BaseCheck] | None = None,
    ) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._listeners = listeners if listeners is not None else ValidationListeners()

        if checks is None:
            checks = (
                FileExistenceCheck(),
                ImportValidityCheck(),
                SyntaxValidityCheck(),
                PolicyComplianceCheck(),
            )
        # Dispatch order is the aggregation order.
        self._checks: tuple[BaseCheck, ...] = tuple(
            sorted(checks, key=lambda c: c.kind.order())
        )

    # ── Properties ─────────────────────────────────────────────────

    @property
    def version(self) -> str:
        """Return the HallucinationGuard version string."""
        from hallucination_guard import __version__

        return __version__

    @property
    def config(self) -> GuardConfig:
        """Snapshot of the current configuration."""
        with self._lock:
            return self._config

    @property
    def listeners(self) -> ValidationListeners:
        return self._listeners

    @property
    def checks(self) -> tuple[BaseCheck, ...]:
        return self._checks

    # ── Class Methods (constructors) ──────────────────────────────

    @classmethod
    def from_config(
        cls, path: str, listeners: ValidationListeners | None = None
    ) -> HallucinationGuard:
        """
        Create a guard from a YAML config file.

        Args:
            path: Path to the configuration file.
            listeners: Optional listener registry.

        Returns:
            Configured HallucinationGuard instance.
        """
        return cls(load_config(path), listeners=listeners)

    @classmethod
    def default(
        cls,
        project_root: str = ".",
        policy: PolicyDocument | None = None,
        listeners: ValidationListeners | None = None,
    ) -> HallucinationGuard:
        """
        Create a guard with every check enabled.

        No config file needed — good for quick starts and testing.
        """
        return cls(
            GuardConfig(project_root=project_root, policy=policy),
            listeners=listeners,
        )

    # ── Configuration ─────────────────────────────────────────────

    def set_check_enabled(self, kind: CheckKind | str, enabled: bool) -> None:
        """
        Enable or disable one check for subsequent validations.

        Raises:
            ValueError: If ``kind`` is not a known check.
        """
        kind = CheckKind(kind)
        with self._lock:
            checks = self._config.enabled_checks.with_check(kind, enabled)
            self._config = self._config.model_copy(update={"enabled_checks": checks})
        logger.debug("Check %s %s", kind.value, "enabled" if enabled else "disabled")

    def update_policy(self, policy: PolicyDocument | None) -> None:
        """Replace the policy document for subsequent validations."""
        with self._lock:
            self._config = self._config.model_copy(update={"policy": policy})
        logger.debug("Policy document %s", "replaced" if policy else "removed")

    # ── Validation ────────────────────────────────────────────────

    async def validate_async(self, action: AgentAction) -> ValidationResult:
        """
        Run every enabled, applicable check against an action.

        Checks run concurrently; results are returned grouped in the
        fixed check order. A failing check becomes a BLOCK result, so
        this always returns a complete ValidationResult.

        Args:
            action: The proposed action.

        Returns:
            The aggregated ValidationResult.
        """
        config = self.config
        selected = [
            check
            for check in self._checks
            if config.enabled_checks.is_enabled(check.kind)
            and check.applies_to(action, config)
        ]
        logger.debug(
            "Validating %s %s with checks: %s",
            action.kind.value,
            action.target_path,
            ", ".join(c.name for c in selected) or "(none)",
        )

        batches = await asyncio.gather(*(c.run(action, config) for c in selected))
        result = ValidationResult.from_results(r for batch in batches for r in batch)

        if not result.passed:
            logger.info(
                "Action %s %s BLOCKED: %s",
                action.kind.value,
                action.target_path,
                "; ".join(result.blocking_reasons or []),
            )
        elif result.requires_approval:
            logger.info(
                "Action %s %s requires approval: %s",
                action.kind.value,
                action.target_path,
                "; ".join(result.approval_reasons),
            )

        self._listeners.notify(action, result)
        return result

    def validate(self, action: AgentAction) -> ValidationResult:
        """Synchronous version of validate_async()."""
        return _run_sync(self.validate_async(action))

    async def validate_many_async(
        self, actions: Sequence[AgentAction]
    ) -> list[ValidationResult]:
        """Validate actions concurrently; results follow input order."""
        return list(await asyncio.gather(*(self.validate_async(a) for a in actions)))

    def validate_many(self, actions: Sequence[AgentAction]) -> list[ValidationResult]:
        """Synchronous version of validate_many_async()."""
        return _run_sync(self.validate_many_async(actions))

    async def validate_path_async(
        self, path: str, should_exist: bool = True
    ) -> CheckResult:
        """
        Probe one project-relative path.

        Ignores the enabled-check toggles: an explicit call always runs.
        """
        return await check_file_existence(path, self.config.project_root, should_exist)

    def validate_path(self, path: str, should_exist: bool = True) -> CheckResult:
        """Synchronous version of validate_path_async()."""
        return _run_sync(self.validate_path_async(path, should_exist))

    async def validate_content_async(
        self,
        content: str,
        language: Language | str,
        file_path: str | None = None,
    ) -> ValidationResult:
        """
        Check a piece of content outside the full action flow.

        Runs the syntax scan, plus import resolution for script
        languages when ``file_path`` locates the content in the project.
        """
        config = self.config
        try:
            lang: Language | None = Language(str(language).lower())
        except ValueError:
            lang = None

        async def _syntax() -> list[CheckResult]:
            return [check_syntax_validity(content, language, file_path)]

        tasks = [_syntax()]
        if file_path and lang is not None and lang.is_script():
            tasks.insert(
                0,
                check_all_imports(
                    content,
                    file_path,
                    config.project_root,
                    dependency_dir=config.dependency_dir,
                    manifest_file=config.manifest_file,
                ),
            )

        batches = await asyncio.gather(*tasks)
        return ValidationResult.from_results(r for batch in batches for r in batch)

    def validate_content(
        self,
        content: str,
        language: Language | str,
        file_path: str | None = None,
    ) -> ValidationResult:
        """Synchronous version of validate_content_async()."""
        return _run_sync(self.validate_content_async(content, language, file_path))

    # ── Enforcement ───────────────────────────────────────────────

    async def enforce_async(self, action: AgentAction) -> ValidationResult:
        """
        Validate an action and raise unless it may proceed unattended.

        Raises:
            ActionBlockedError: If any check blocks.
            ApprovalRequiredError: If the action is approval-gated.
        """
        result = await self.validate_async(action)

        if not result.passed:
            checks = list(
                dict.fromkeys(r.kind.value for r in result.results if r.is_blocking)
            )
            raise ActionBlockedError(
                f"{action.kind.value} {action.target_path or ''}".strip(),
                reasons=result.blocking_reasons,
                checks=checks,
                details=result.to_dict(),
            )

        if result.requires_approval:
            raise ApprovalRequiredError(
                f"{action.kind.value} {action.target_path or ''}".strip(),
                reasons=result.approval_reasons,
                details=result.to_dict(),
            )

        return result

    def enforce(self, action: AgentAction) -> ValidationResult:
        """Synchronous version of enforce_async()."""
        return _run_sync(self.enforce_async(action))

    # ── Developer Experience Methods ──────────────────────────────

    async def explain_async(self, action: AgentAction) -> str:
        """
        Validate an action and return a human-readable breakdown.

        Never applies the action.
        """
        result = await self.validate_async(action)
        return render_report(action, result)

    def explain(self, action: AgentAction) -> str:
        """Synchronous version of explain_async()."""
        return _run_sync(self.explain_async(action))

    def __repr__(self) -> str:
        config = self.config
        enabled = [
            c.name for c in self._checks if config.enabled_checks.is_enabled(c.kind)
        ]
        return (
            f"<HallucinationGuard root={config.project_root!r} "
            f"policy={'yes' if config.policy else 'no'} "
            f"checks={enabled}>"
        )
