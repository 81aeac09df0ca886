"""HallucinationGuard core module — data models, severities, and the guard class."""

from hallucination_guard.core.models import (
    AgentAction,
    CheckResult,
    Diagnostic,
    PolicyEvaluation,
    ValidationResult,
    Violation,
)
from hallucination_guard.core.severity import (
    ActionKind,
    CheckKind,
    Language,
    Severity,
    ViolationSeverity,
)

__all__ = [
    "ActionKind",
    "CheckKind",
    "Language",
    "Severity",
    "ViolationSeverity",
    "AgentAction",
    "CheckResult",
    "Diagnostic",
    "ValidationResult",
    "Violation",
    "PolicyEvaluation",
]
