"""
HallucinationGuard Severity & Kind Enums
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Core enums that define check outcomes, check kinds, the kinds of
proposed file actions, and the declared languages the scanner knows.
"""

from enum import StrEnum

__all__ = [
    "Severity",
    "CheckKind",
    "ActionKind",
    "Language",
    "ViolationSeverity",
]


class Severity(StrEnum):
    """
    Severity of a single CheckResult.

    - INFO: The check passed; informational only.
    - WARN: Advisory, or a soft failure that needs human approval.
    - BLOCK: Hard failure; the action must not be applied.
    """

    INFO = "info"
    WARN = "warn"
    BLOCK = "block"

    def is_blocking(self) -> bool:
        """Return True if this severity stops the action."""
        return self is Severity.BLOCK


class CheckKind(StrEnum):
    """
    The four independent check engines.

    Declaration order is the fixed aggregation order of a
    ValidationResult, regardless of which check finishes first.
    """

    FILE_EXISTENCE = "file_existence"
    IMPORT_VALIDITY = "import_validity"
    SYNTAX_VALIDITY = "syntax_validity"
    POLICY_COMPLIANCE = "policy_compliance"

    def order(self) -> int:
        """Return the position of this kind in aggregated results."""
        return list(CheckKind).index(self)


class ActionKind(StrEnum):
    """Kind of filesystem mutation an agent proposes."""

    CREATE = "create"
    READ = "read"
    EDIT = "edit"
    DELETE = "delete"
    MOVE = "move"

    def requires_existing_target(self) -> bool:
        """Return True if the target path must already exist."""
        return self in (ActionKind.READ, ActionKind.EDIT, ActionKind.DELETE)


class Language(StrEnum):
    """Declared language of proposed content."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    JSON = "json"
    YAML = "yaml"

    def is_script(self) -> bool:
        """Return True for languages scanned for bracket balance."""
        return self in (Language.TYPESCRIPT, Language.JAVASCRIPT)


class ViolationSeverity(StrEnum):
    """Severity of a single policy violation."""

    ERROR = "error"
    WARNING = "warning"
