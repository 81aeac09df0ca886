"""Shared fixtures for HallucinationGuard tests."""

from __future__ import annotations

import json
import os
import shutil
import tempfile

import pytest

from hallucination_guard import HallucinationGuard, PolicyDocument, load_policy_from_dict


def write_file(root: str, rel_path: str, content: str = "") -> str:
    """Write a file under ``root``, creating parent directories."""
    path = os.path.join(root, rel_path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for file tests."""
    d = tempfile.mkdtemp(prefix="hallucination_guard_test_")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def project_root(temp_dir) -> str:
    """
    A small frontend project:

    - package.json declaring react, vitest and a scoped peer dependency
    - node_modules/lodash installed but undeclared
    - a few source files and a directory module with an index file
    """
    manifest = {
        "name": "shop",
        "dependencies": {"react": "^18.2.0"},
        "devDependencies": {"vitest": "^1.0.0"},
        "peerDependencies": {"@acme/ui": "^2.0.0"},
    }
    write_file(temp_dir, "package.json", json.dumps(manifest))
    os.makedirs(os.path.join(temp_dir, "node_modules", "lodash"))
    write_file(temp_dir, "src/utils/format.ts", "export const format = (x: number) => `${x}`;\n")
    write_file(temp_dir, "src/components/Button.tsx", "export default function Button() {}\n")
    write_file(temp_dir, "src/lib/index.ts", "export const lib = 1;\n")
    write_file(temp_dir, "src/api/client.ts", "export const client = {};\n")
    return temp_dir


@pytest.fixture
def policy() -> PolicyDocument:
    """A policy exercising every rule family."""
    return load_policy_from_dict(
        {
            "project": {"name": "shop", "type": "frontend"},
            "techStack": {"forbiddenPackages": ["moment", "jquery"]},
            "directoryStructure": {
                "src/hooks": {"maxLines": 20, "requiredExports": ["default"]},
                "src/utils": {"forbidden": ["document."]},
            },
            "moduleBoundaries": [
                {"from": "src/components/**", "cannotImport": ["src/api/**"]},
                {"from": "src/utils/**", "canImport": ["src/utils/**", "lodash"]},
            ],
            "codeQuality": {"forbiddenPatterns": [r"console\.log", "debugger"]},
            "modificationRules": {
                "protectedFiles": ["package.json"],
                "protectedDirectories": ["src/secrets"],
                "requireApproval": [
                    {"pattern": "src/config/**", "reason": "Config changes need review"}
                ],
            },
        }
    )


@pytest.fixture
def guard(project_root) -> HallucinationGuard:
    """A guard over the sample project with no policy."""
    return HallucinationGuard.default(project_root)


@pytest.fixture
def policy_guard(project_root, policy) -> HallucinationGuard:
    """A guard over the sample project with the sample policy."""
    return HallucinationGuard.default(project_root, policy=policy)


@pytest.fixture
def make_file(project_root):
    """Return a helper writing files into the sample project."""

    def _make(rel_path: str, content: str = "") -> str:
        return write_file(project_root, rel_path, content)

    return _make
