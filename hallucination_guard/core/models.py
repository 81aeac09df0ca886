"""
HallucinationGuard Action & Result Data Models
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Defines the core dataclasses that flow through the validation pipeline:
AgentAction (input), CheckResult (one per check finding),
ValidationResult (aggregated output), and the policy evaluation types.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from hallucination_guard.core.severity import (
    ActionKind,
    CheckKind,
    Language,
    Severity,
    ViolationSeverity,
)

__all__ = [
    "AgentAction",
    "CheckResult",
    "Diagnostic",
    "ValidationResult",
    "Violation",
    "PolicyEvaluation",
]


def _coerce_language(value: Language | str | None) -> Language | str | None:
    if value is None or isinstance(value, Language):
        return value
    try:
        return Language(value.lower())
    except ValueError:
        return value


@dataclass(frozen=True)
class AgentAction:
    """
    One proposed filesystem mutation, awaiting validation.

    Produced by the agent layer and consumed read-only by the guard.

    Attributes:
        kind: What the agent wants to do with the target.
        target_path: Project-relative path the action writes or reads.
        source_path: Original path for moves.
        content: Proposed file content, if any.
        language: Declared language of ``content``.
        imports: Pre-extracted import specifiers. When None, imports are
            extracted from ``content``.
        dependencies: Packages the action adds to the project.
    """

    kind: ActionKind
    target_path: str | None = None
    source_path: str | None = None
    content: str | None = None
    language: Language | str | None = None
    imports: tuple[str, ...] | None = None
    dependencies: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ActionKind(self.kind))
        object.__setattr__(self, "language", _coerce_language(self.language))
        if self.imports is not None:
            object.__setattr__(self, "imports", tuple(self.imports))
        if self.dependencies is not None:
            object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return {
            "kind": self.kind.value,
            "target_path": self.target_path,
            "source_path": self.source_path,
            "content": self.content,
            "language": str(self.language) if self.language is not None else None,
            "imports": list(self.imports) if self.imports is not None else None,
            "dependencies": (
                list(self.dependencies) if self.dependencies is not None else None
            ),
        }


@dataclass(frozen=True)
class Diagnostic:
    """A single syntax finding, 1-based line and column."""

    line: int
    column: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "column": self.column, "message": self.message}


@dataclass(frozen=True)
class CheckResult:
    """
    The output of a single check finding.

    BLOCK always implies ``passed=False`` and INFO always implies
    ``passed=True``. WARN pairs with either: advisory when passed,
    approval-gated when not.

    Attributes:
        passed: Whether this finding lets the action through.
        kind: Which check produced it.
        severity: INFO, WARN or BLOCK.
        message: Human-readable description.
        details: Plain-data diagnostics for display or serialization.
    """

    passed: bool
    kind: CheckKind
    severity: Severity
    message: str
    details: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.severity is Severity.BLOCK and self.passed:
            raise ValueError("BLOCK results must not pass")
        if self.severity is Severity.INFO and not self.passed:
            raise ValueError("INFO results must pass")

    @classmethod
    def ok(
        cls, kind: CheckKind, message: str, details: dict[str, Any] | None = None
    ) -> CheckResult:
        return cls(True, kind, Severity.INFO, message, details)

    @classmethod
    def warn(
        cls,
        kind: CheckKind,
        message: str,
        details: dict[str, Any] | None = None,
        passed: bool = True,
    ) -> CheckResult:
        return cls(passed, kind, Severity.WARN, message, details)

    @classmethod
    def block(
        cls, kind: CheckKind, message: str, details: dict[str, Any] | None = None
    ) -> CheckResult:
        return cls(False, kind, Severity.BLOCK, message, details)

    @property
    def is_blocking(self) -> bool:
        return not self.passed and self.severity is Severity.BLOCK

    @property
    def requires_approval(self) -> bool:
        """Return True for a soft failure that waits on human approval."""
        return (
            not self.passed
            and self.severity is Severity.WARN
            and bool(self.details and self.details.get("requires_approval"))
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return {
            "passed": self.passed,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "details": self.details,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Aggregated decision for one action.

    ``passed`` is False if and only if some result blocks. Approval-gated
    results (WARN, not passed) leave ``passed`` True but set
    ``requires_approval``, so the caller can tell the three outcomes apart.
    """

    passed: bool
    results: list[CheckResult] = field(default_factory=list)
    blocking_reasons: list[str] | None = None
    warnings: list[str] | None = None

    @classmethod
    def from_results(cls, results: Iterable[CheckResult]) -> ValidationResult:
        """Aggregate check results into one decision."""
        collected = list(results)
        blocking = [r.message for r in collected if r.is_blocking]
        warnings = [r.message for r in collected if r.severity is Severity.WARN]
        return cls(
            passed=not blocking,
            results=collected,
            blocking_reasons=blocking or None,
            warnings=warnings or None,
        )

    @property
    def requires_approval(self) -> bool:
        """Return True if any result is an approval gate."""
        return any(r.requires_approval for r in self.results)

    @property
    def approval_reasons(self) -> list[str]:
        reasons: list[str] = []
        for r in self.results:
            if r.requires_approval and r.details:
                reasons.extend(r.details.get("approval_reasons", []))
        return reasons

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dictionary."""
        return {
            "passed": self.passed,
            "requires_approval": self.requires_approval,
            "results": [r.to_dict() for r in self.results],
            "blocking_reasons": self.blocking_reasons,
            "warnings": self.warnings,
        }


@dataclass(frozen=True)
class Violation:
    """
    A single policy rule breach.

    Attributes:
        severity: ERROR blocks, WARNING is advisory.
        message: Human-readable description.
        rule: Reference of the rule that produced it.
        location: Path, or ``path:line``, the breach points at.
        suggestion: How to resolve it.
    """

    severity: ViolationSeverity
    message: str
    rule: str
    location: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "rule": self.rule,
            "location": self.location,
            "suggestion": self.suggestion,
        }


@dataclass
class PolicyEvaluation:
    """Everything the policy evaluator found for one action."""

    violations: list[Violation] = field(default_factory=list)
    requires_approval: bool = False
    approval_reasons: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity is ViolationSeverity.ERROR]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity is ViolationSeverity.WARNING]

    @property
    def valid(self) -> bool:
        """Return True if no ERROR violation was found."""
        return not self.errors
