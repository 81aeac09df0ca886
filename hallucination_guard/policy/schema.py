"""
Policy Document Schema
~~~~~~~~~~~~~~~~~~~~~~

Pydantic models for the declarative project policy. Policy files use
camelCase keys; snake_case field names are accepted as well.

Every section has defaults, so an empty section means "no rule",
never "allow everything".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "PolicyDocument",
    "ProjectInfo",
    "TechStack",
    "DirectoryRule",
    "ModuleBoundary",
    "NamingConventions",
    "CodeQuality",
    "ApprovalRule",
    "ModificationRules",
]


class _PolicyModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class ProjectInfo(_PolicyModel):
    """Project identity."""

    name: str = "unnamed-project"
    type: str = "generic"
    description: str | None = None


class TechStack(_PolicyModel):
    """Framework, language and packages the project forbids."""

    framework: str = "react"
    version: str = "^18.0.0"
    language: str = "typescript"
    styling: str | None = None
    state_management: str | None = None
    forbidden_packages: list[str] = Field(default_factory=list)


class DirectoryRule(_PolicyModel):
    """Rules for files living under one directory."""

    pattern: str | None = None
    max_lines: int | None = Field(default=None, ge=1)
    required_exports: list[str] | None = None
    forbidden: list[str] | None = None
    must_be_pure: bool | None = None


class ModuleBoundary(_PolicyModel):
    """Which modules files matching ``from`` may and may not import."""

    from_: str = Field(alias="from")
    can_import: list[str] = Field(default_factory=list)
    cannot_import: list[str] = Field(default_factory=list)


class NamingConventions(_PolicyModel):
    """Naming convention per artifact kind."""

    components: str = "PascalCase"
    hooks: str = "camelCase with use prefix"
    utils: str = "camelCase"
    constants: str = "SCREAMING_SNAKE_CASE"
    types: str = "PascalCase"


class CodeQuality(_PolicyModel):
    """Size ceilings and forbidden code patterns."""

    max_function_lines: int = Field(default=50, ge=1)
    max_file_lines: int = Field(default=300, ge=1)
    max_parameters: int = Field(default=4, ge=0)
    require_jsdoc: bool = False
    forbidden_patterns: list[str] = Field(default_factory=list)


class ApprovalRule(_PolicyModel):
    """A path pattern whose modification needs human approval."""

    pattern: str
    reason: str


class ModificationRules(_PolicyModel):
    """Protected paths and approval triggers."""

    protected_files: list[str] = Field(default_factory=list)
    protected_directories: list[str] = Field(default_factory=list)
    require_approval: list[ApprovalRule] = Field(default_factory=list)


class PolicyDocument(_PolicyModel):
    """
    Root model for a project policy document.

    Handed to the guard already validated; the guard never mutates it,
    only swaps it wholesale via ``update_policy``.
    """

    version: str = "1.0"
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    tech_stack: TechStack = Field(default_factory=TechStack)
    directory_structure: dict[str, DirectoryRule] = Field(default_factory=dict)
    module_boundaries: list[ModuleBoundary] = Field(default_factory=list)
    naming_conventions: NamingConventions = Field(default_factory=NamingConventions)
    code_quality: CodeQuality = Field(default_factory=CodeQuality)
    modification_rules: ModificationRules = Field(default_factory=ModificationRules)
