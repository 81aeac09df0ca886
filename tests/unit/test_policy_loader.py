"""Tests for policy document loading and validation."""

import json
import os

import pytest

from hallucination_guard import load_policy, load_policy_from_dict
from hallucination_guard.exceptions import (
    PolicyFileNotFoundError,
    PolicyParseError,
    PolicyValidationError,
)
from hallucination_guard.policy.loader import deep_merge

POLICY_YAML = """\
version: "1.0"
project:
  name: shop
  type: frontend
techStack:
  framework: react
  forbiddenPackages: [moment]
directoryStructure:
  src/components:
    maxLines: 200
    requiredExports: [default]
moduleBoundaries:
  - from: "src/components/**"
    cannotImport: ["src/api/**"]
modificationRules:
  protectedDirectories: [src/secrets]
  requireApproval:
    - pattern: "src/config/**"
      reason: Config changes need review
"""


class TestLoadPolicy:
    def test_yaml_file(self, temp_dir):
        path = os.path.join(temp_dir, "policy.yaml")
        with open(path, "w") as f:
            f.write(POLICY_YAML)

        policy = load_policy(path)

        assert policy.project.name == "shop"
        assert policy.tech_stack.forbidden_packages == ["moment"]
        assert policy.directory_structure["src/components"].max_lines == 200
        assert policy.module_boundaries[0].from_ == "src/components/**"
        assert policy.modification_rules.require_approval[0].reason == (
            "Config changes need review"
        )
        # Untouched sections keep their defaults
        assert policy.code_quality.max_file_lines == 300
        assert policy.naming_conventions.hooks == "camelCase with use prefix"

    def test_json_file(self, temp_dir):
        path = os.path.join(temp_dir, "policy.json")
        with open(path, "w") as f:
            json.dump({"codeQuality": {"maxFileLines": 120}}, f)
        assert load_policy(path).code_quality.max_file_lines == 120

    def test_missing_file(self, temp_dir):
        with pytest.raises(PolicyFileNotFoundError):
            load_policy(os.path.join(temp_dir, "nope.yaml"))

    def test_unparseable_file(self, temp_dir):
        path = os.path.join(temp_dir, "policy.yaml")
        with open(path, "w") as f:
            f.write("project: [unclosed\n")
        with pytest.raises(PolicyParseError):
            load_policy(path)

    def test_non_mapping_file(self, temp_dir):
        path = os.path.join(temp_dir, "policy.yaml")
        with open(path, "w") as f:
            f.write("- a\n- b\n")
        with pytest.raises(PolicyParseError):
            load_policy(path)

    def test_empty_file_is_default_policy(self, temp_dir):
        path = os.path.join(temp_dir, "policy.yaml")
        open(path, "w").close()
        policy = load_policy(path)
        assert policy.modification_rules.protected_directories == [
            "node_modules",
            ".git",
        ]


class TestLoadPolicyFromDict:
    def test_snake_case_keys_accepted(self):
        policy = load_policy_from_dict(
            {
                "code_quality": {"max_parameters": 2},
                "modification_rules": {"protected_files": [".env"]},
                "directory_structure": {"src/my_dir": {"max_lines": 5}},
            }
        )
        assert policy.code_quality.max_parameters == 2
        assert policy.code_quality.max_function_lines == 50
        assert policy.modification_rules.protected_files == [".env"]
        assert policy.directory_structure["src/my_dir"].max_lines == 5

    def test_unknown_key_rejected(self):
        with pytest.raises(PolicyValidationError):
            load_policy_from_dict({"codeQuality": {"maxBananas": 3}})

    def test_invalid_value_rejected(self):
        with pytest.raises(PolicyValidationError):
            load_policy_from_dict({"codeQuality": {"maxFileLines": 0}})

    def test_approval_rule_requires_reason(self):
        with pytest.raises(PolicyValidationError):
            load_policy_from_dict(
                {"modificationRules": {"requireApproval": [{"pattern": "src/**"}]}}
            )

    def test_defaults_not_mutated(self):
        load_policy_from_dict({"modificationRules": {"protectedDirectories": []}})
        policy = load_policy_from_dict({})
        assert policy.modification_rules.protected_directories == [
            "node_modules",
            ".git",
        ]

    def test_policy_is_frozen(self):
        policy = load_policy_from_dict({})
        with pytest.raises(Exception):
            policy.version = "2.0"


class TestDeepMerge:
    def test_nested_override(self):
        merged = deep_merge({"a": {"b": 1, "c": 2}, "d": [1]}, {"a": {"b": 3}, "d": [2]})
        assert merged == {"a": {"b": 3, "c": 2}, "d": [2]}
