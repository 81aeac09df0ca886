"""
Policy Evaluator
~~~~~~~~~~~~~~~~

Interprets a PolicyDocument against a proposed AgentAction and reports
every rule breach, plus whether the action needs human approval.

Rules evaluated:
- Protected files and directories (ERROR)
- Module boundaries: ``cannotImport`` / ``canImport`` globs (ERROR)
- Forbidden packages and forbidden code patterns (ERROR)
- Approval triggers on the target path (approval, not a violation)
- File and directory line ceilings, function shape (WARNING)
- Naming conventions, directory forbidden content, required exports (WARNING)

The evaluator only reports; turning an evaluation into a pass/warn/block
decision is the compliance check's job.
"""

from __future__ import annotations

import functools
import logging
import posixpath
import re

from hallucination_guard.core.models import AgentAction, PolicyEvaluation, Violation
from hallucination_guard.core.severity import ActionKind, ViolationSeverity
from hallucination_guard.core.specifiers import (
    extract_imports,
    is_builtin,
    is_external,
    package_root,
)
from hallucination_guard.policy import naming
from hallucination_guard.policy.schema import DirectoryRule, PolicyDocument

__all__ = [
    "PolicyEvaluator",
    "normalize_path",
    "match_glob",
    "path_matches",
    "in_directory",
]

logger = logging.getLogger(__name__)

_ERROR = ViolationSeverity.ERROR
_WARNING = ViolationSeverity.WARNING

# Directory segment → NamingConventions field
_NAMING_KINDS = {
    "components": "components",
    "hooks": "hooks",
    "utils": "utils",
}

_FUNCTION_RE = re.compile(r"\bfunction\b\s*\*?\s*([\w$]*)\s*\(([^)]*)\)")
_ARROW_RE = re.compile(r"\(([^()]*)\)\s*=>")


# ── Path Helpers ─────────────────────────────────────────────────────────────


def normalize_path(path: str) -> str:
    """Use forward slashes and collapse repeats, ``.`` and ``..`` segments."""
    normalized = re.sub(r"/+", "/", path.replace("\\", "/"))
    if not normalized:
        return ""
    normalized = posixpath.normpath(normalized)
    return "" if normalized == "." else normalized


@functools.lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile a path glob.

    ``*`` and ``?`` stay within one path segment, ``**`` spans any
    number of segments.
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


def match_glob(path: str, pattern: str) -> bool:
    """Match a whole path against a segment-aware glob."""
    return _glob_regex(pattern).fullmatch(path) is not None


def path_matches(path: str, pattern: str) -> bool:
    """
    Match a path against a glob.

    A pattern naming a directory also matches everything beneath it.
    """
    pattern = normalize_path(pattern).rstrip("/")
    if not pattern:
        return False
    return (
        match_glob(path, pattern)
        or path == pattern
        or path.startswith(pattern + "/")
        or match_glob(path, pattern + "/**")
    )


def in_directory(path: str, directory: str) -> bool:
    """Return True if any segment run of ``path`` is ``directory``."""
    directory = normalize_path(directory).strip("/")
    return bool(directory) and f"/{directory}/" in f"/{path}"


def _line_of(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1


def _count_params(text: str) -> int:
    """Count top-level comma-separated parameters."""
    if not text.strip():
        return 0
    depth = 0
    count = 1
    for char in text:
        if char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            count += 1
    # Trailing comma
    if text.rstrip().endswith(","):
        count -= 1
    return count


def _body_lines(content: str, brace_index: int) -> int | None:
    """Number of lines spanned by the block opening at ``brace_index``."""
    depth = 0
    for i in range(brace_index, len(content)):
        if content[i] == "{":
            depth += 1
        elif content[i] == "}":
            depth -= 1
            if depth == 0:
                return content.count("\n", brace_index, i) + 1
    return None


# ── Evaluator ────────────────────────────────────────────────────────────────


class PolicyEvaluator:
    """
    Evaluates AgentActions against a PolicyDocument.

    Stateless: the same evaluator can serve any number of policies and
    actions, concurrently.
    """

    def evaluate(self, action: AgentAction, policy: PolicyDocument) -> PolicyEvaluation:
        """
        Evaluate one action.

        Args:
            action: The proposed action.
            policy: The validated policy document.

        Returns:
            PolicyEvaluation with all violations and approval reasons.
        """
        result = PolicyEvaluation()
        target = normalize_path(action.target_path) if action.target_path else None

        for path in self._protected_candidates(action):
            result.violations.extend(self._check_protection(path, policy))

        if target:
            reasons = self._check_approval(target, policy)
            result.approval_reasons.extend(reasons)

        imports = self._implied_imports(action)
        if target and imports:
            result.violations.extend(
                self._check_module_boundaries(target, imports, policy)
            )

        result.violations.extend(self._check_forbidden_packages(action, policy))

        if action.content:
            result.violations.extend(
                self._check_code_quality(action.content, target, policy)
            )

        if target:
            result.violations.extend(self._check_naming(target, policy))
            if action.content:
                result.violations.extend(
                    self._check_directory_rules(target, action, policy)
                )

        result.requires_approval = bool(result.approval_reasons)
        if result.violations or result.requires_approval:
            logger.debug(
                "Policy evaluation of %s: %d violation(s), approval=%s",
                action.target_path,
                len(result.violations),
                result.requires_approval,
            )
        return result

    def evaluate_many(
        self, actions: list[AgentAction], policy: PolicyDocument
    ) -> list[PolicyEvaluation]:
        """Evaluate each action independently; output follows input order."""
        return [self.evaluate(action, policy) for action in actions]

    # ── Protected Paths ───────────────────────────────────────────

    @staticmethod
    def _protected_candidates(action: AgentAction) -> list[str]:
        paths: list[str] = []
        if action.target_path:
            paths.append(normalize_path(action.target_path))
        if action.source_path and action.kind in (ActionKind.MOVE, ActionKind.DELETE):
            source = normalize_path(action.source_path)
            if source not in paths:
                paths.append(source)
        return paths

    @staticmethod
    def _check_protection(path: str, policy: PolicyDocument) -> list[Violation]:
        violations: list[Violation] = []
        rules = policy.modification_rules

        for directory in rules.protected_directories:
            if path_matches(path, directory):
                violations.append(
                    Violation(
                        severity=_ERROR,
                        rule="protected_directory",
                        message=f"Cannot modify files in protected directory: {directory}",
                        location=path,
                        suggestion="This directory is protected by the project policy",
                    )
                )

        for protected in rules.protected_files:
            pattern = normalize_path(protected)
            if (
                match_glob(path, pattern)
                or path == pattern
                or path.endswith("/" + pattern)
            ):
                violations.append(
                    Violation(
                        severity=_ERROR,
                        rule="protected_file",
                        message=f"Cannot modify protected file: {protected}",
                        location=path,
                        suggestion="This file is protected and requires manual modification",
                    )
                )

        return violations

    @staticmethod
    def _check_approval(path: str, policy: PolicyDocument) -> list[str]:
        return [
            f"{rule.reason} (pattern: {rule.pattern})"
            for rule in policy.modification_rules.require_approval
            if path_matches(path, rule.pattern)
        ]

    # ── Module Boundaries ─────────────────────────────────────────

    @staticmethod
    def _implied_imports(action: AgentAction) -> list[str]:
        if action.imports is not None:
            imports = list(action.imports)
        elif action.content:
            imports = extract_imports(action.content)
        else:
            imports = []
        imports.extend(action.dependencies or ())
        return list(dict.fromkeys(imports))

    @staticmethod
    def _module_path(specifier: str, target: str) -> str:
        if specifier.startswith("."):
            joined = posixpath.join(posixpath.dirname(target), specifier)
            return normalize_path(joined)
        return normalize_path(specifier).lstrip("/")

    def _check_module_boundaries(
        self, target: str, imports: list[str], policy: PolicyDocument
    ) -> list[Violation]:
        violations: list[Violation] = []

        for boundary in policy.module_boundaries:
            if not path_matches(target, boundary.from_):
                continue

            for specifier in imports:
                module = self._module_path(specifier, target)

                def _hits(pattern: str) -> bool:
                    return path_matches(module, pattern) or path_matches(
                        specifier, pattern
                    )

                forbidden = next(
                    (p for p in boundary.cannot_import if _hits(p)), None
                )
                if forbidden is not None:
                    violations.append(
                        Violation(
                            severity=_ERROR,
                            rule="module_boundary",
                            message=f"Module {target} cannot import from {specifier}",
                            location=target,
                            suggestion=(
                                f"Files in {boundary.from_} cannot import from {forbidden}"
                            ),
                        )
                    )
                    continue

                if (
                    boundary.can_import
                    and not is_builtin(specifier)
                    and not any(_hits(p) for p in boundary.can_import)
                ):
                    violations.append(
                        Violation(
                            severity=_ERROR,
                            rule="module_boundary",
                            message=(
                                f"Import {specifier} is not in allowed list for {target}"
                            ),
                            location=target,
                            suggestion=(
                                f"Allowed imports: {', '.join(boundary.can_import)}"
                            ),
                        )
                    )

        return violations

    # ── Forbidden Packages ────────────────────────────────────────

    @staticmethod
    def _check_forbidden_packages(
        action: AgentAction, policy: PolicyDocument
    ) -> list[Violation]:
        forbidden = policy.tech_stack.forbidden_packages
        if not forbidden:
            return []

        packages = list(action.dependencies or ())
        imports = (
            list(action.imports)
            if action.imports is not None
            else extract_imports(action.content or "")
        )
        packages.extend(package_root(i) for i in imports if is_external(i))

        violations: list[Violation] = []
        for package in dict.fromkeys(packages):
            root = package_root(package)
            if any(
                package == f or root == f or match_glob(package, f) for f in forbidden
            ):
                violations.append(
                    Violation(
                        severity=_ERROR,
                        rule="forbidden_package",
                        message=f'Package "{package}" is forbidden by the project policy',
                        location=action.target_path,
                        suggestion="Please use an alternative package allowed by the project",
                    )
                )
        return violations

    # ── Code Quality ──────────────────────────────────────────────

    def _check_code_quality(
        self, content: str, target: str | None, policy: PolicyDocument
    ) -> list[Violation]:
        quality = policy.code_quality
        violations: list[Violation] = []
        lines = content.split("\n")

        if len(lines) > quality.max_file_lines:
            violations.append(
                Violation(
                    severity=_WARNING,
                    rule="max_file_lines",
                    message=(
                        f"File exceeds maximum lines "
                        f"({len(lines)} > {quality.max_file_lines})"
                    ),
                    location=target,
                    suggestion="Consider splitting this file into smaller modules",
                )
            )

        for pattern in quality.forbidden_patterns:
            try:
                regex = re.compile(pattern)
            except re.error:
                regex = re.compile(re.escape(pattern))
            for line_num, line in enumerate(lines, start=1):
                match = regex.search(line)
                if match is None:
                    continue
                violations.append(
                    Violation(
                        severity=_ERROR,
                        rule="forbidden_pattern",
                        message=f'Forbidden pattern "{pattern}" found',
                        location=f"{target}:{line_num}" if target else f"line {line_num}",
                        suggestion=(
                            f"Remove or replace the forbidden pattern: {match.group(0)}"
                        ),
                    )
                )

        violations.extend(self._check_function_shape(content, target, policy))
        return violations

    @staticmethod
    def _check_function_shape(
        content: str, target: str | None, policy: PolicyDocument
    ) -> list[Violation]:
        quality = policy.code_quality
        violations: list[Violation] = []

        def _where(index: int) -> str:
            line = _line_of(content, index)
            return f"{target}:{line}" if target else f"line {line}"

        functions: list[tuple[int, str, str, int | None]] = []
        for match in _FUNCTION_RE.finditer(content):
            name = match.group(1) or "anonymous function"
            brace = None
            tail = content[match.end():]
            brace_at = tail.find("{")
            semi_at = tail.find(";")
            if brace_at != -1 and (semi_at == -1 or brace_at < semi_at):
                brace = match.end() + brace_at
            functions.append((match.start(), name, match.group(2), brace))

        for match in _ARROW_RE.finditer(content):
            brace = None
            rest = content[match.end():]
            stripped = rest.lstrip()
            if stripped.startswith("{"):
                brace = match.end() + (len(rest) - len(stripped))
            functions.append((match.start(), "arrow function", match.group(1), brace))

        for start, name, params, brace in sorted(functions):
            count = _count_params(params)
            if count > quality.max_parameters:
                violations.append(
                    Violation(
                        severity=_WARNING,
                        rule="max_parameters",
                        message=(
                            f"{name} takes too many parameters "
                            f"({count} > {quality.max_parameters})"
                        ),
                        location=_where(start),
                        suggestion="Group related parameters into an options object",
                    )
                )
            if brace is None:
                continue
            body = _body_lines(content, brace)
            if body is not None and body > quality.max_function_lines:
                violations.append(
                    Violation(
                        severity=_WARNING,
                        rule="max_function_lines",
                        message=(
                            f"{name} is too long "
                            f"({body} > {quality.max_function_lines} lines)"
                        ),
                        location=_where(start),
                        suggestion="Extract part of the body into helper functions",
                    )
                )

        return violations

    # ── Naming ────────────────────────────────────────────────────

    @staticmethod
    def _check_naming(target: str, policy: PolicyDocument) -> list[Violation]:
        file_name = posixpath.basename(target)
        stem = file_name.split(".")[0]
        if not stem or stem == "index":
            return []

        violations: list[Violation] = []
        for directory, field_name in _NAMING_KINDS.items():
            if not in_directory(target, directory):
                continue
            convention = getattr(policy.naming_conventions, field_name)
            if naming.conforms(stem, convention):
                continue
            violations.append(
                Violation(
                    severity=_WARNING,
                    rule="naming_convention",
                    message=(
                        f'File "{file_name}" in {directory}/ should follow '
                        f"{convention}"
                    ),
                    location=target,
                    suggestion=f"Rename to {naming.convert(stem, convention)}",
                )
            )
        return violations

    # ── Directory Rules ───────────────────────────────────────────

    def _check_directory_rules(
        self, target: str, action: AgentAction, policy: PolicyDocument
    ) -> list[Violation]:
        content = action.content or ""
        violations: list[Violation] = []

        for directory, rule in policy.directory_structure.items():
            if not in_directory(target, directory):
                continue
            violations.extend(
                self._apply_directory_rule(directory, rule, target, action, content)
            )

        return violations

    @staticmethod
    def _apply_directory_rule(
        directory: str,
        rule: DirectoryRule,
        target: str,
        action: AgentAction,
        content: str,
    ) -> list[Violation]:
        violations: list[Violation] = []

        if rule.max_lines is not None:
            line_count = len(content.split("\n"))
            if line_count > rule.max_lines:
                violations.append(
                    Violation(
                        severity=_WARNING,
                        rule="directory_max_lines",
                        message=(
                            f"File in {directory}/ exceeds max lines "
                            f"({line_count} > {rule.max_lines})"
                        ),
                        location=target,
                    )
                )

        for forbidden in rule.forbidden or ():
            if forbidden in content:
                violations.append(
                    Violation(
                        severity=_WARNING,
                        rule="directory_forbidden",
                        message=f"Files in {directory}/ should not contain: {forbidden}",
                        location=target,
                    )
                )

        if action.kind is ActionKind.CREATE:
            for name in rule.required_exports or ():
                if not _exports(content, name):
                    violations.append(
                        Violation(
                            severity=_WARNING,
                            rule="required_export",
                            message=f"Files in {directory}/ must export {name}",
                            location=target,
                        )
                    )

        return violations


def _exports(content: str, name: str) -> bool:
    if name == "default":
        return re.search(r"\bexport\s+default\b", content) is not None
    escaped = re.escape(name)
    declaration = re.compile(
        r"\bexport\s+(?:default\s+)?(?:declare\s+)?(?:async\s+)?"
        r"(?:const|let|var|function\*?|class|interface|type|enum)\s+"
        + escaped
        + r"\b"
    )
    listed = re.compile(r"\bexport\s*(?:type\s*)?\{[^}]*\b" + escaped + r"\b[^}]*\}")
    return bool(declaration.search(content) or listed.search(content))
