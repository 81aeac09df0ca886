"""Tests for import extraction and resolution."""

import os

import pytest

from hallucination_guard import AgentAction, GuardConfig, Severity
from hallucination_guard.checks import imports as imports_module
from hallucination_guard.checks.imports import (
    SOURCE_EXTENSIONS,
    ImportValidityCheck,
    candidate_paths,
    check_all_imports,
    check_import_validity,
)
from hallucination_guard.core.specifiers import (
    extract_imports,
    is_builtin,
    is_external,
    package_root,
)

SAMPLE = """\
import React from 'react';
import { a } from "./a";
const b = require('./b');
const c = await import('./c');
import './styles.css';
import type { T } from './types';
import { a as again } from "./a";
"""


class TestExtractImports:
    def test_all_forms_in_first_seen_order(self):
        assert extract_imports(SAMPLE) == [
            "react",
            "./a",
            "./b",
            "./c",
            "./styles.css",
            "./types",
        ]

    def test_duplicates_collapse(self):
        code = "import x from 'x';\nconst y = require('x');\nimport('x');"
        assert extract_imports(code) == ["x"]

    def test_idempotent(self):
        assert extract_imports(SAMPLE) == extract_imports(SAMPLE)

    def test_no_imports(self):
        assert extract_imports("const x = 1;") == []

    def test_non_literal_require_ignored(self):
        assert extract_imports("const m = require(name);") == []

    def test_dollar_bindings(self):
        code = "import $ from 'jquery/dist/jquery';\nimport { $el, _ } from './dom';\n"
        assert extract_imports(code) == ["jquery/dist/jquery", "./dom"]


class TestSpecifierClassification:
    def test_builtin(self):
        assert is_builtin("node:fs")
        assert not is_builtin("fs")

    @pytest.mark.parametrize(
        "specifier,external",
        [
            ("react", True),
            ("@acme/ui", True),
            ("./a", False),
            ("../a", False),
            ("/abs/a", False),
            ("node:path", False),
        ],
    )
    def test_external(self, specifier, external):
        assert is_external(specifier) is external

    @pytest.mark.parametrize(
        "specifier,root",
        [
            ("lodash", "lodash"),
            ("lodash/fp", "lodash"),
            ("@acme/ui", "@acme/ui"),
            ("@acme/ui/button", "@acme/ui"),
        ],
    )
    def test_package_root(self, specifier, root):
        assert package_root(specifier) == root


class TestCandidatePaths:
    def test_lookup_order(self):
        paths = candidate_paths("./thing", "/p/src")
        assert paths[0] == os.path.normpath("/p/src/thing")
        assert paths[1 : 1 + len(SOURCE_EXTENSIONS)] == [
            os.path.normpath("/p/src/thing") + ext for ext in SOURCE_EXTENSIONS
        ]
        assert paths[-1] == os.path.join(
            os.path.normpath("/p/src/thing"), "index" + SOURCE_EXTENSIONS[-1]
        )
        assert len(paths) == 1 + 2 * len(SOURCE_EXTENSIONS)


class TestCheckImportValidity:
    async def test_builtin_never_touches_filesystem(self, monkeypatch):
        def _boom(*args, **kwargs):
            raise AssertionError("filesystem touched")

        monkeypatch.setattr(imports_module, "_first_existing", _boom)
        monkeypatch.setattr(imports_module, "_package_exists", _boom)
        result = await check_import_validity(
            "node:fs", "src/a.ts", "/definitely/not/a/project"
        )
        assert result.passed
        assert result.severity == Severity.INFO

    async def test_installed_package(self, project_root):
        result = await check_import_validity("lodash", "src/a.ts", project_root)
        assert result.passed

    async def test_declared_dependency(self, project_root):
        result = await check_import_validity("react", "src/a.ts", project_root)
        assert result.passed

    async def test_declared_dev_dependency_subpath(self, project_root):
        result = await check_import_validity("vitest/config", "src/a.ts", project_root)
        assert result.passed

    async def test_scoped_peer_dependency_subpath(self, project_root):
        result = await check_import_validity("@acme/ui/button", "src/a.ts", project_root)
        assert result.passed

    async def test_missing_package_blocks(self, project_root):
        result = await check_import_validity("left-pad", "src/a.ts", project_root)
        assert result.severity == Severity.BLOCK
        assert 'Package "left-pad" is not installed' in result.message
        assert result.details["package"] == "left-pad"

    async def test_malformed_manifest_trusts_nothing(self, project_root):
        with open(os.path.join(project_root, "package.json"), "w") as f:
            f.write("{ not json")
        result = await check_import_validity("react", "src/a.ts", project_root)
        assert result.severity == Severity.BLOCK
        # Installed packages are still found on disk
        installed = await check_import_validity("lodash", "src/a.ts", project_root)
        assert installed.passed

    async def test_custom_dependency_dir(self, project_root):
        os.makedirs(os.path.join(project_root, "vendor", "left-pad"))
        result = await check_import_validity(
            "left-pad", "src/a.ts", project_root, dependency_dir="vendor"
        )
        assert result.passed

    async def test_relative_with_extension_lookup(self, project_root):
        result = await check_import_validity(
            "./format", "src/utils/other.ts", project_root
        )
        assert result.passed

    async def test_relative_directory_index(self, project_root):
        result = await check_import_validity("../lib", "src/utils/other.ts", project_root)
        assert result.passed

    async def test_relative_missing_lists_tried_paths(self, project_root):
        result = await check_import_validity(
            "./missing", "src/utils/other.ts", project_root
        )
        assert result.severity == Severity.BLOCK
        assert not result.passed
        tried = result.details["tried_paths"]
        assert tried
        assert len(tried) == 1 + 2 * len(SOURCE_EXTENSIONS)
        assert tried[0].endswith("missing")


class TestCheckAllImports:
    async def test_one_result_per_distinct_specifier_in_order(self, project_root):
        code = (
            "import fs from 'node:fs';\n"
            "import { format } from './format';\n"
            "import nope from './nope';\n"
            "import pad from 'left-pad';\n"
            "import again from './format';\n"
        )
        results = await check_all_imports(code, "src/utils/other.ts", project_root)
        assert [r.passed for r in results] == [True, True, False, False]
        assert results[2].details["import_path"] == "./nope"
        assert results[3].details["import_path"] == "left-pad"

    async def test_declared_imports_override_extraction(self, project_root):
        results = await check_all_imports(
            "import x from 'left-pad';",
            "src/a.ts",
            project_root,
            imports=["react", "react"],
        )
        assert len(results) == 1
        assert results[0].passed


class TestImportValidityCheck:
    def test_applies_to(self, project_root):
        check = ImportValidityCheck()
        config = GuardConfig(project_root=project_root)
        with_imports = AgentAction(
            kind="create", target_path="src/a.ts", content="import x from 'react';"
        )
        no_imports = AgentAction(
            kind="create", target_path="src/a.ts", content="const x = 1;"
        )
        no_target = AgentAction(kind="create", content="import x from 'react';")
        assert check.applies_to(with_imports, config)
        assert not check.applies_to(no_imports, config)
        assert not check.applies_to(no_target, config)

    def test_declared_empty_import_list_skips(self, project_root):
        check = ImportValidityCheck()
        config = GuardConfig(project_root=project_root)
        action = AgentAction(
            kind="create",
            target_path="src/a.ts",
            content="import x from 'left-pad';",
            imports=[],
        )
        assert not check.applies_to(action, config)
