"""
Configuration Loader
~~~~~~~~~~~~~~~~~~~~

Loads and validates a guard configuration YAML file, merging with defaults.

A configuration carries its policy either inline under ``policy`` or by
reference under ``policy_file``. Relative ``policy_file`` and
``project_root`` values resolve against the configuration file's
directory.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from hallucination_guard.config.defaults import DEFAULT_CONFIG
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.exceptions import (
    ConfigFileNotFoundError,
    ConfigValidationError,
)
from hallucination_guard.policy.loader import (
    deep_merge,
    load_policy,
    load_policy_from_dict,
)

__all__ = ["load_config", "load_config_from_dict"]

logger = logging.getLogger(__name__)


def load_config(path: str) -> GuardConfig:
    """
    Load configuration from a YAML file.

    Merges user config with defaults and validates via Pydantic.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated GuardConfig instance.

    Raises:
        ConfigFileNotFoundError: If the file doesn't exist.
        ConfigValidationError: If the config fails validation.
        PolicyError: If the referenced policy cannot be loaded.
    """
    if not os.path.exists(path):
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigValidationError(
            f"Invalid YAML in configuration file: {exc}"
        ) from exc

    if not isinstance(user_config, dict):
        raise ConfigValidationError(
            f"Configuration file {path} must contain a mapping"
        )

    base_dir = os.path.dirname(os.path.abspath(path))
    return load_config_from_dict(user_config, base_dir=base_dir)


def load_config_from_dict(
    data: dict[str, Any], base_dir: str | None = None
) -> GuardConfig:
    """
    Load configuration from a dictionary, merging with defaults.

    Args:
        data: Configuration dictionary.
        base_dir: Directory that relative paths resolve against.
            Defaults to the current working directory.

    Returns:
        Validated GuardConfig instance.

    Raises:
        ConfigValidationError: If validation fails.
        PolicyError: If the referenced policy cannot be loaded.
    """
    merged = deep_merge(copy.deepcopy(DEFAULT_CONFIG), dict(data))
    base_dir = base_dir or os.getcwd()

    inline_policy = merged.pop("policy", None)
    policy_file = merged.pop("policy_file", None)
    if inline_policy is not None and policy_file is not None:
        raise ConfigValidationError(
            "Configuration may set 'policy' or 'policy_file', not both"
        )

    root = str(merged.get("project_root") or ".")
    merged["project_root"] = os.path.join(base_dir, os.path.expanduser(root))

    if policy_file is not None:
        policy_path = os.path.join(base_dir, os.path.expanduser(str(policy_file)))
        logger.debug("Loading policy referenced by configuration: %s", policy_path)
        merged["policy"] = load_policy(policy_path)
    elif inline_policy is not None:
        if not isinstance(inline_policy, dict):
            raise ConfigValidationError("'policy' must be a mapping")
        merged["policy"] = load_policy_from_dict(inline_policy)

    try:
        return GuardConfig(**merged)
    except PydanticValidationError as exc:
        raise ConfigValidationError(f"Configuration validation failed: {exc}") from exc
