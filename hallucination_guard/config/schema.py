"""
Configuration Schema
~~~~~~~~~~~~~~~~~~~~

Pydantic models for validating HallucinationGuard configuration.

Config values are frozen: the guard replaces its GuardConfig wholesale
when a setting changes, so a snapshot taken at the start of a
validation never moves underneath it.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hallucination_guard.core.severity import CheckKind
from hallucination_guard.policy.schema import PolicyDocument

__all__ = ["GuardConfig", "EnabledChecks"]


class EnabledChecks(BaseModel):
    """Per-check enable/disable toggles."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_existence: bool = True
    import_validity: bool = True
    syntax_validity: bool = True
    policy_compliance: bool = True

    def is_enabled(self, kind: CheckKind | str) -> bool:
        return bool(getattr(self, CheckKind(kind).value))

    def with_check(self, kind: CheckKind | str, enabled: bool) -> EnabledChecks:
        """Return a copy with one toggle changed."""
        return self.model_copy(update={CheckKind(kind).value: enabled})


class GuardConfig(BaseModel):
    """
    Root configuration model for HallucinationGuard.

    Validated on load with clear error messages for invalid values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_root: str
    policy: PolicyDocument | None = None
    enabled_checks: EnabledChecks = Field(default_factory=EnabledChecks)
    dependency_dir: str = "node_modules"
    manifest_file: str = "package.json"

    @field_validator("project_root")
    @classmethod
    def validate_project_root(cls, v: str) -> str:
        """Make the project root absolute."""
        if not v:
            raise ValueError("project_root must not be empty")
        return os.path.abspath(os.path.expanduser(v))
