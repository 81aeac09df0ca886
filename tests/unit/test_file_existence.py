"""Tests for the filesystem probe."""

import os
import tempfile

import pytest

from hallucination_guard import AgentAction, CheckKind, GuardConfig, Severity
from hallucination_guard.checks.file_existence import (
    FileExistenceCheck,
    check_file_existence,
    check_files_existence,
    resolve_within_root,
)


class TestResolveWithinRoot:
    def test_inside_root(self, project_root):
        full = resolve_within_root("src/utils/format.ts", project_root)
        assert full == os.path.join(
            os.path.realpath(project_root), "src", "utils", "format.ts"
        )

    def test_root_itself(self, project_root):
        assert resolve_within_root(".", project_root) == os.path.realpath(project_root)

    def test_dotdot_inside_root_is_fine(self, project_root):
        assert resolve_within_root("src/../package.json", project_root) is not None

    @pytest.mark.parametrize(
        "path", ["../outside.txt", "src/../../outside.txt", "/etc/passwd"]
    )
    def test_escapes_are_rejected(self, project_root, path):
        assert resolve_within_root(path, project_root) is None

    def test_sibling_with_common_prefix_is_rejected(self, project_root):
        sibling = os.path.basename(project_root) + "-evil/file.ts"
        assert resolve_within_root(os.path.join("..", sibling), project_root) is None


class TestCheckFileExistence:
    async def test_existing_file(self, project_root):
        result = await check_file_existence("src/utils/format.ts", project_root)
        assert result.passed
        assert result.severity == Severity.INFO
        assert result.kind == CheckKind.FILE_EXISTENCE

    async def test_missing_file_blocks(self, project_root):
        result = await check_file_existence("src/utils/nope.ts", project_root)
        assert not result.passed
        assert result.severity == Severity.BLOCK
        assert "does not exist" in result.message

    async def test_missing_file_not_expected(self, project_root):
        result = await check_file_existence(
            "src/utils/new.ts", project_root, should_exist=False
        )
        assert result.passed
        assert result.severity == Severity.INFO

    async def test_existing_file_not_expected_warns(self, project_root):
        result = await check_file_existence(
            "src/utils/format.ts", project_root, should_exist=False
        )
        assert result.severity == Severity.WARN
        assert not result.passed
        assert "already exists" in result.message
        # An overwrite warning is not an approval gate
        assert not result.requires_approval
        assert not result.is_blocking

    async def test_directory_where_file_expected_blocks(self, project_root):
        result = await check_file_existence("src/utils", project_root)
        assert result.severity == Severity.BLOCK
        assert "not a file" in result.message
        assert result.details["is_directory"] is True

    @pytest.mark.parametrize("should_exist", [True, False])
    @pytest.mark.parametrize("path", ["../outside.txt", "/etc/hosts"])
    async def test_escape_blocks_regardless_of_expectation(
        self, project_root, path, should_exist
    ):
        result = await check_file_existence(path, project_root, should_exist)
        assert result.severity == Severity.BLOCK
        assert not result.passed
        assert "outside project root" in result.message

    async def test_symlink_escape_blocks(self, project_root):
        outside = tempfile.mkdtemp(prefix="hallucination_guard_outside_")
        with open(os.path.join(outside, "secret.txt"), "w") as f:
            f.write("x")
        link = os.path.join(project_root, "linked")
        try:
            os.symlink(outside, link)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        result = await check_file_existence("linked/secret.txt", project_root)
        assert result.severity == Severity.BLOCK
        assert "outside project root" in result.message

    async def test_batch_keeps_input_order(self, project_root):
        paths = ["src/lib/index.ts", "missing.ts", "src/api/client.ts"]
        results = await check_files_existence(paths, project_root)
        assert [r.passed for r in results] == [True, False, True]
        assert results[1].details["path"] == "missing.ts"

    async def test_null_byte_becomes_block(self, project_root):
        result = await check_file_existence("a\x00b.ts", project_root)
        assert result.severity == Severity.BLOCK
        assert not result.passed


class TestFileExistenceCheck:
    def test_applies_only_with_target(self, project_root):
        check = FileExistenceCheck()
        config = GuardConfig(project_root=project_root)
        assert check.applies_to(AgentAction(kind="create", target_path="a.ts"), config)
        assert not check.applies_to(AgentAction(kind="create", content="x"), config)

    @pytest.mark.parametrize(
        "kind,passed",
        [
            ("create", True),
            ("move", True),
            ("read", False),
            ("edit", False),
            ("delete", False),
        ],
    )
    async def test_existence_expectation_follows_action_kind(
        self, project_root, kind, passed
    ):
        check = FileExistenceCheck()
        config = GuardConfig(project_root=project_root)
        results = await check.run(
            AgentAction(kind=kind, target_path="src/new/file.ts"), config
        )
        assert len(results) == 1
        assert results[0].passed is passed
