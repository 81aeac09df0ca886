"""
hallucination-guard — Pre-flight validation for agent file actions.

hallucination-guard sits between a code-writing agent and the
filesystem. Before a proposed create, edit, delete or move is applied it
checks:

- that referenced files exist (and stay inside the project root)
- that every import resolves to a builtin, an installed package or a file
- that the proposed content is lexically well-formed
- that the action complies with the project policy document

Quick Start::

    from hallucination_guard import AgentAction, HallucinationGuard

    guard = HallucinationGuard.default("/path/to/project")

    result = guard.validate(
        AgentAction(
            kind="create",
            target_path="src/utils/format.ts",
            content="import { x } from './missing';",
            language="typescript",
        )
    )
    if not result.passed:
        print(result.blocking_reasons)
"""

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.config.schema import EnabledChecks, GuardConfig
from hallucination_guard.core.guard import HallucinationGuard
from hallucination_guard.core.models import (
    AgentAction,
    CheckResult,
    Diagnostic,
    PolicyEvaluation,
    ValidationResult,
    Violation,
)
from hallucination_guard.core.report import render_report
from hallucination_guard.core.severity import (
    ActionKind,
    CheckKind,
    Language,
    Severity,
    ViolationSeverity,
)
from hallucination_guard.observability.listeners import ValidationListeners
from hallucination_guard.observability.stdout_exporter import StdoutExporter
from hallucination_guard.policy.evaluator import PolicyEvaluator
from hallucination_guard.policy.loader import load_policy, load_policy_from_dict
from hallucination_guard.policy.schema import PolicyDocument

__version__ = "0.1.0"

__all__ = [
    # Main class
    "HallucinationGuard",
    # Enums
    "ActionKind",
    "CheckKind",
    "Language",
    "Severity",
    "ViolationSeverity",
    # Data models
    "AgentAction",
    "CheckResult",
    "Diagnostic",
    "ValidationResult",
    "Violation",
    "PolicyEvaluation",
    # Configuration and policy
    "GuardConfig",
    "EnabledChecks",
    "PolicyDocument",
    "PolicyEvaluator",
    "load_policy",
    "load_policy_from_dict",
    # Extension bases
    "BaseCheck",
    # Observability
    "ValidationListeners",
    "StdoutExporter",
    "render_report",
    # Version
    "__version__",
]
