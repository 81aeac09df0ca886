"""
Policy Compliance Check
~~~~~~~~~~~~~~~~~~~~~~~

Turns a PolicyEvaluation into a single CheckResult:

- any ERROR violation → BLOCK, message joins every error
- otherwise an approval trigger → WARN, not passed (approval gate)
- otherwise WARNING violations only → WARN, passed (advisory)
- otherwise → INFO
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult
from hallucination_guard.core.severity import CheckKind
from hallucination_guard.policy.evaluator import PolicyEvaluator
from hallucination_guard.policy.schema import PolicyDocument

__all__ = [
    "PolicyComplianceCheck",
    "check_policy_compliance",
    "check_actions_compliance",
]

logger = logging.getLogger(__name__)

_DEFAULT_EVALUATOR = PolicyEvaluator()


def check_policy_compliance(
    action: AgentAction,
    policy: PolicyDocument,
    evaluator: PolicyEvaluator | None = None,
) -> CheckResult:
    """
    Evaluate one action against the policy and classify the outcome.

    Args:
        action: The proposed action.
        policy: The validated policy document.
        evaluator: Evaluator to use; a shared stateless one by default.

    Returns:
        One POLICY_COMPLIANCE CheckResult.
    """
    kind = CheckKind.POLICY_COMPLIANCE
    evaluation = (evaluator or _DEFAULT_EVALUATOR).evaluate(action, policy)
    errors = evaluation.errors
    warnings = [v.to_dict() for v in evaluation.warnings]

    if errors:
        return CheckResult.block(
            kind,
            "Policy compliance violations: " + "; ".join(v.message for v in errors),
            details={
                "errors": [v.to_dict() for v in errors],
                "warnings": warnings,
                "requires_approval": evaluation.requires_approval,
                "approval_reasons": list(evaluation.approval_reasons),
            },
        )

    if evaluation.requires_approval:
        return CheckResult.warn(
            kind,
            "Action requires approval: " + "; ".join(evaluation.approval_reasons),
            details={
                "requires_approval": True,
                "approval_reasons": list(evaluation.approval_reasons),
                "warnings": warnings,
            },
            passed=False,
        )

    if warnings:
        return CheckResult.warn(
            kind,
            "Policy warnings: "
            + "; ".join(v.message for v in evaluation.warnings),
            details={"warnings": warnings},
        )

    return CheckResult.ok(kind, "Action is policy compliant")


async def check_actions_compliance(
    actions: Sequence[AgentAction],
    policy: PolicyDocument,
    evaluator: PolicyEvaluator | None = None,
) -> list[CheckResult]:
    """Check every action independently; results follow input order."""

    async def _one(action: AgentAction) -> CheckResult:
        try:
            return await asyncio.to_thread(
                check_policy_compliance, action, policy, evaluator
            )
        except Exception as exc:
            logger.error("Policy check of %s failed: %s", action.target_path, exc)
            return CheckResult.block(
                CheckKind.POLICY_COMPLIANCE,
                f"policy_compliance check failed: {exc}",
                details={"error": str(exc)},
            )

    return list(await asyncio.gather(*(_one(action) for action in actions)))


class PolicyComplianceCheck(BaseCheck):
    """Runs when the guard has a policy document configured."""

    def __init__(self, evaluator: PolicyEvaluator | None = None) -> None:
        self._evaluator = evaluator or _DEFAULT_EVALUATOR

    @property
    def kind(self) -> CheckKind:
        return CheckKind.POLICY_COMPLIANCE

    def applies_to(self, action: AgentAction, config: GuardConfig) -> bool:
        return config.policy is not None

    async def _run(
        self, action: AgentAction, config: GuardConfig
    ) -> list[CheckResult]:
        policy = config.policy
        if policy is None:
            return []
        result = check_policy_compliance(action, policy, self._evaluator)
        if not result.passed:
            logger.debug("Policy compliance for %s: %s", action.target_path, result.message)
        return [result]
