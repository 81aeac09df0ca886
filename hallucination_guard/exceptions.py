"""
HallucinationGuard Custom Exceptions
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

All custom exception classes for HallucinationGuard, organized by domain.

Checks themselves never raise: every failure inside a check becomes a
BLOCK ``CheckResult``. Exceptions are reserved for loading configuration
and policy documents, for ``enforce()``, and for listener registry misuse.

**Structured Error Messages**

Enforcement exceptions provide three structured fields:
- ``what_happened``: Clear plain-English description
- ``check_triggered``: Name of the check that produced the outcome
- ``how_to_fix``: Concrete, actionable steps
"""

__all__ = [
    # Base
    "GuardError",
    # Config
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigValidationError",
    # Policy
    "PolicyError",
    "PolicyFileNotFoundError",
    "PolicyParseError",
    "PolicyValidationError",
    # Enforcement
    "ValidationError",
    "ActionBlockedError",
    "ApprovalRequiredError",
    # Observability
    "ObservabilityError",
    "ListenerNotRegisteredError",
]


# ── Formatting Helper ────────────────────────────────────────────────────────

_SEPARATOR = "─" * 52


def _format_structured_error(
    title: str,
    what_happened: str,
    check_triggered: str,
    how_to_fix: str,
) -> str:
    """Build a rich, structured error message."""
    lines = [
        f"  {title}",
        f"  {_SEPARATOR}",
        "  What happened:",
        *[f"    {line}" for line in what_happened.strip().splitlines()],
        "",
        "  Check triggered:",
        f"    {check_triggered}",
        "",
        "  How to fix:",
        *[f"    {line}" for line in how_to_fix.strip().splitlines()],
    ]
    return "\n".join(lines)


# ── Base Exception ───────────────────────────────────────────────────────────


class GuardError(Exception):
    """Base exception for all HallucinationGuard errors."""

    def __init__(self, message: str = "", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


# ── Config Exceptions ────────────────────────────────────────────────────────


class ConfigError(GuardError):
    """Base exception for configuration-related errors."""


class ConfigFileNotFoundError(ConfigError):
    """Raised when a configuration file cannot be found at the specified path."""


class ConfigValidationError(ConfigError):
    """Raised when configuration values fail validation."""


# ── Policy Exceptions ────────────────────────────────────────────────────────


class PolicyError(GuardError):
    """Base exception for policy document errors."""


class PolicyFileNotFoundError(PolicyError):
    """Raised when a policy document cannot be found at the specified path."""


class PolicyParseError(PolicyError):
    """Raised when a policy document is not valid YAML or JSON."""


class PolicyValidationError(PolicyError):
    """Raised when a policy document does not match the expected schema."""


# ── Enforcement Exceptions ───────────────────────────────────────────────────


class ValidationError(GuardError):
    """Base exception for enforcement outcomes raised by ``enforce()``."""


class ActionBlockedError(ValidationError):
    """
    Raised by ``enforce()`` when at least one check blocks the action.

    Structured fields:
    - ``what_happened``: every blocking reason, one per line
    - ``check_triggered``: the checks that blocked
    - ``how_to_fix``: concrete, actionable remediation steps
    """

    def __init__(
        self,
        message: str = "Action blocked",
        reasons: list[str] | None = None,
        checks: list[str] | None = None,
        details: dict | None = None,
        what_happened: str = "",
        how_to_fix: str = "",
    ) -> None:
        self.reasons = list(reasons or [])
        self.checks = list(checks or [])
        self.what_happened = what_happened or "\n".join(self.reasons) or message
        self.check_triggered = ", ".join(self.checks)
        self.how_to_fix = how_to_fix or (
            "1. Make sure every referenced file and package really exists\n"
            "2. Fix the reported syntax errors in the proposed content\n"
            "3. Use guard.explain(action) for a detailed breakdown"
        )
        super().__init__(message, details)

    def __str__(self) -> str:
        return _format_structured_error(
            title=f"ActionBlockedError: {self.args[0]}",
            what_happened=self.what_happened,
            check_triggered=self.check_triggered or "(unknown)",
            how_to_fix=self.how_to_fix,
        )


class ApprovalRequiredError(ValidationError):
    """
    Raised by ``enforce()`` when an action is clean but approval-gated.

    Structured fields:
    - ``what_happened``: the approval reasons from the policy
    - ``check_triggered``: always the policy compliance check
    - ``how_to_fix``: how to obtain or avoid the approval gate
    """

    def __init__(
        self,
        message: str = "Action requires approval",
        reasons: list[str] | None = None,
        details: dict | None = None,
        what_happened: str = "",
        how_to_fix: str = "",
    ) -> None:
        self.reasons = list(reasons or [])
        self.what_happened = what_happened or "\n".join(self.reasons) or message
        self.check_triggered = "policy_compliance"
        self.how_to_fix = how_to_fix or (
            "1. Ask a human reviewer to approve this change\n"
            "2. Target a path not covered by modificationRules.requireApproval\n"
            "3. Adjust the approval patterns in your policy document"
        )
        super().__init__(message, details)

    def __str__(self) -> str:
        return _format_structured_error(
            title=f"ApprovalRequiredError: {self.args[0]}",
            what_happened=self.what_happened,
            check_triggered=self.check_triggered,
            how_to_fix=self.how_to_fix,
        )


# ── Observability Exceptions ─────────────────────────────────────────────────


class ObservabilityError(GuardError):
    """Base exception for listener and exporter errors."""


class ListenerNotRegisteredError(ObservabilityError):
    """Raised when unregistering a handle the registry never issued."""
