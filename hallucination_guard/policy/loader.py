"""
Policy Loader
~~~~~~~~~~~~~

Loads a policy document from YAML or JSON, normalises snake_case keys,
merges it onto the default policy and validates it.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from hallucination_guard.exceptions import (
    PolicyFileNotFoundError,
    PolicyParseError,
    PolicyValidationError,
)
from hallucination_guard.policy.defaults import DEFAULT_POLICY
from hallucination_guard.policy.schema import PolicyDocument

__all__ = ["load_policy", "load_policy_from_dict", "deep_merge"]

logger = logging.getLogger(__name__)

# Keys whose values are user-named mappings (directory paths); their
# children are left untouched.
_FREE_FORM_KEYS = {"directoryStructure"}

_SNAKE_KEYS = {
    "tech_stack",
    "directory_structure",
    "module_boundaries",
    "naming_conventions",
    "code_quality",
    "modification_rules",
    "forbidden_packages",
    "state_management",
    "max_lines",
    "required_exports",
    "must_be_pure",
    "can_import",
    "cannot_import",
    "max_function_lines",
    "max_file_lines",
    "max_parameters",
    "require_jsdoc",
    "forbidden_patterns",
    "protected_files",
    "protected_directories",
    "require_approval",
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts, with override taking precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalize_keys(value: Any, free_form: bool = False) -> Any:
    if isinstance(value, list):
        return [_normalize_keys(item) for item in value]
    if not isinstance(value, dict):
        return value
    normalized: dict[str, Any] = {}
    for key, child in value.items():
        new_key = key if free_form or key not in _SNAKE_KEYS else to_camel(key)
        if free_form:
            normalized[new_key] = _normalize_keys(child)
        else:
            normalized[new_key] = _normalize_keys(
                child, free_form=new_key in _FREE_FORM_KEYS
            )
    return normalized


def load_policy(path: str) -> PolicyDocument:
    """
    Load a policy document from a YAML or JSON file.

    Args:
        path: Path to the policy file.

    Returns:
        Validated PolicyDocument.

    Raises:
        PolicyFileNotFoundError: If the file doesn't exist.
        PolicyParseError: If the file is not valid YAML/JSON.
        PolicyValidationError: If the document fails schema validation.
    """
    if not os.path.exists(path):
        raise PolicyFileNotFoundError(f"Policy file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise PolicyParseError(f"Invalid YAML/JSON in policy file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PolicyParseError(
            f"Policy file {path} must contain a mapping, got {type(data).__name__}"
        )

    logger.debug("Loaded policy document from %s", path)
    return load_policy_from_dict(data)


def load_policy_from_dict(data: dict[str, Any]) -> PolicyDocument:
    """
    Build a policy document from a mapping, merging with defaults.

    Args:
        data: Policy mapping with camelCase or snake_case keys.

    Returns:
        Validated PolicyDocument.

    Raises:
        PolicyValidationError: If validation fails.
    """
    merged = deep_merge(copy.deepcopy(DEFAULT_POLICY), _normalize_keys(data))

    try:
        return PolicyDocument.model_validate(merged)
    except PydanticValidationError as exc:
        raise PolicyValidationError(f"Policy validation failed: {exc}") from exc
