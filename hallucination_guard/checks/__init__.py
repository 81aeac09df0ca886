"""HallucinationGuard checks — the independent engines the guard dispatches to."""

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.checks.compliance import (
    PolicyComplianceCheck,
    check_actions_compliance,
    check_policy_compliance,
)
from hallucination_guard.checks.file_existence import (
    FileExistenceCheck,
    check_file_existence,
    check_files_existence,
)
from hallucination_guard.checks.imports import (
    ImportValidityCheck,
    check_all_imports,
    check_import_validity,
)
from hallucination_guard.checks.syntax import (
    SyntaxValidityCheck,
    check_syntax_validity,
)

__all__ = [
    "BaseCheck",
    "FileExistenceCheck",
    "ImportValidityCheck",
    "SyntaxValidityCheck",
    "PolicyComplianceCheck",
    "check_file_existence",
    "check_files_existence",
    "check_import_validity",
    "check_all_imports",
    "check_syntax_validity",
    "check_policy_compliance",
    "check_actions_compliance",
]
