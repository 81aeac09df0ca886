"""HallucinationGuard configuration — loading, validation, and defaults."""

from hallucination_guard.config.defaults import DEFAULT_CONFIG
from hallucination_guard.config.loader import load_config, load_config_from_dict
from hallucination_guard.config.schema import EnabledChecks, GuardConfig

__all__ = [
    "load_config",
    "load_config_from_dict",
    "GuardConfig",
    "EnabledChecks",
    "DEFAULT_CONFIG",
]
