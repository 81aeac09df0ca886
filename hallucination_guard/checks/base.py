"""
HallucinationGuard Base Check
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Abstract base class for the check engines the guard dispatches to.
Each check inspects an AgentAction and returns one or more CheckResults.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult
from hallucination_guard.core.severity import CheckKind

__all__ = ["BaseCheck"]

logger = logging.getLogger(__name__)


class BaseCheck(ABC):
    """
    Abstract base class for validation checks.

    Subclasses must implement:
        - kind: Which CheckKind the check produces.
        - applies_to(): Whether the action carries what the check needs.
        - _run(): The check logic.

    ``run()`` is total: any exception escaping ``_run()`` becomes a single
    BLOCK result carrying the error text, so one failing check never
    aborts its siblings.
    """

    @property
    @abstractmethod
    def kind(self) -> CheckKind:
        """The kind of every result this check produces."""
        ...

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    def applies_to(self, action: AgentAction, config: GuardConfig) -> bool:
        """Return True if this check should run for the action."""
        ...

    @abstractmethod
    async def _run(
        self, action: AgentAction, config: GuardConfig
    ) -> list[CheckResult]: ...

    async def run(self, action: AgentAction, config: GuardConfig) -> list[CheckResult]:
        """
        Run the check against an action.

        Args:
            action: The proposed action.
            config: Snapshot of the guard configuration for this call.

        Returns:
            One or more CheckResults; never raises.
        """
        try:
            return await self._run(action, config)
        except Exception as exc:
            logger.error("Check %s failed on %s: %s", self.name, action.target_path, exc)
            return [
                CheckResult.block(
                    self.kind,
                    f"{self.name} check failed: {exc}",
                    details={"error": str(exc)},
                )
            ]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind.value!r}>"
