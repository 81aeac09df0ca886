"""
Integration Tests for Guard Configuration Files
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

YAML configuration loading, policy references and building a guard
from a configuration file.
"""

from __future__ import annotations

import os

import pytest

from hallucination_guard import AgentAction, HallucinationGuard
from hallucination_guard.config import load_config, load_config_from_dict
from hallucination_guard.exceptions import (
    ConfigFileNotFoundError,
    ConfigValidationError,
    PolicyFileNotFoundError,
)


def write_file(root: str, rel_path: str, content: str) -> str:
    path = os.path.join(root, rel_path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


POLICY_YAML = """\
modificationRules:
  protectedDirectories: [src/secrets]
"""


class TestLoadConfig:
    def test_defaults(self, temp_dir):
        path = write_file(temp_dir, "guard.yaml", "")
        config = load_config(path)
        assert config.project_root == os.path.abspath(temp_dir)
        assert config.policy is None
        assert config.enabled_checks.file_existence is True
        assert config.dependency_dir == "node_modules"
        assert config.manifest_file == "package.json"

    def test_relative_project_root(self, temp_dir):
        path = write_file(temp_dir, "conf/guard.yaml", "project_root: ../app\n")
        config = load_config(path)
        assert config.project_root == os.path.abspath(os.path.join(temp_dir, "app"))

    def test_policy_file_relative_to_config(self, temp_dir):
        write_file(temp_dir, "conf/policy.yaml", POLICY_YAML)
        path = write_file(temp_dir, "conf/guard.yaml", "policy_file: policy.yaml\n")
        config = load_config(path)
        assert config.policy.modification_rules.protected_directories == [
            "src/secrets"
        ]

    def test_inline_policy(self, temp_dir):
        path = write_file(
            temp_dir,
            "guard.yaml",
            "policy:\n  codeQuality:\n    maxParameters: 2\n",
        )
        assert load_config(path).policy.code_quality.max_parameters == 2

    def test_enabled_checks(self, temp_dir):
        path = write_file(
            temp_dir,
            "guard.yaml",
            "enabled_checks:\n  syntax_validity: false\n",
        )
        checks = load_config(path).enabled_checks
        assert checks.syntax_validity is False
        assert checks.import_validity is True

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigFileNotFoundError):
            load_config(os.path.join(temp_dir, "nope.yaml"))

    def test_invalid_yaml(self, temp_dir):
        path = write_file(temp_dir, "guard.yaml", "enabled_checks: [unclosed\n")
        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_non_mapping(self, temp_dir):
        path = write_file(temp_dir, "guard.yaml", "- a\n")
        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_missing_policy_file(self, temp_dir):
        path = write_file(temp_dir, "guard.yaml", "policy_file: nope.yaml\n")
        with pytest.raises(PolicyFileNotFoundError):
            load_config(path)


class TestLoadConfigFromDict:
    def test_both_policy_keys_rejected(self, temp_dir):
        with pytest.raises(ConfigValidationError):
            load_config_from_dict(
                {"policy": {}, "policy_file": "p.yaml"}, base_dir=temp_dir
            )

    def test_unknown_toggle_rejected(self, temp_dir):
        with pytest.raises(ConfigValidationError):
            load_config_from_dict(
                {"enabled_checks": {"spell_check": True}}, base_dir=temp_dir
            )

    def test_unknown_key_rejected(self, temp_dir):
        with pytest.raises(ConfigValidationError):
            load_config_from_dict({"telemetry": True}, base_dir=temp_dir)

    def test_inline_policy_must_be_mapping(self, temp_dir):
        with pytest.raises(ConfigValidationError):
            load_config_from_dict({"policy": ["a"]}, base_dir=temp_dir)

    def test_config_is_frozen(self, temp_dir):
        config = load_config_from_dict({}, base_dir=temp_dir)
        with pytest.raises(Exception):
            config.project_root = "/elsewhere"


def test_guard_from_config(project_root):
    write_file(project_root, "policy.yaml", POLICY_YAML)
    path = write_file(
        project_root,
        "guard.yaml",
        "project_root: .\npolicy_file: policy.yaml\n",
    )
    guard = HallucinationGuard.from_config(path)

    assert guard.validate(AgentAction(kind="read", target_path="src/lib/index.ts")).passed
    blocked = guard.validate(AgentAction(kind="create", target_path="src/secrets/k.ts"))
    assert not blocked.passed
