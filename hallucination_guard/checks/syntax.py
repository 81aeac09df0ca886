"""
Syntax Validity Check
~~~~~~~~~~~~~~~~~~~~~

Best-effort lexical scan of proposed content. Script languages get a
bracket-balance scan that understands strings and comments, plus
per-line quote parity; JSON gets a strict parse with the error offset
mapped to a line and column. Other languages are not scanned.

This is not a parser: it catches unbalanced and unterminated constructs,
nothing more.
"""

from __future__ import annotations

import json
import logging
import re

from hallucination_guard.checks.base import BaseCheck
from hallucination_guard.config.schema import GuardConfig
from hallucination_guard.core.models import AgentAction, CheckResult, Diagnostic
from hallucination_guard.core.severity import CheckKind, Language

__all__ = [
    "SyntaxValidityCheck",
    "scan_brackets",
    "scan_quote_parity",
    "check_json_syntax",
    "offset_to_position",
    "check_syntax_validity",
]

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")": "(", "]": "[", "}": "{"}
_QUOTES = ("'", '"', "`")

_QUOTE_PARITY = (
    (re.compile(r"(?<!\\)'"), "Possible unclosed single-quoted string"),
    (re.compile(r'(?<!\\)"'), "Possible unclosed double-quoted string"),
    (re.compile(r"(?<!\\)`"), "Possible unclosed template literal"),
)


def scan_brackets(code: str) -> list[Diagnostic]:
    """
    Report unmatched closers and unclosed openers.

    Brackets inside strings, line comments and block comments are
    ignored. String state survives line breaks (template literals), line
    comments end at each newline, block comments run until ``*/``.
    """
    errors: list[Diagnostic] = []
    stack: list[tuple[str, int, int]] = []

    in_string = False
    string_char = ""
    in_comment = False
    in_block_comment = False

    for line_idx, line in enumerate(code.split("\n")):
        col_idx = 0
        while col_idx < len(line):
            char = line[col_idx]
            prev_char = line[col_idx - 1] if col_idx > 0 else ""
            next_char = line[col_idx + 1] if col_idx < len(line) - 1 else ""

            if not in_comment and not in_block_comment:
                if char in _QUOTES and prev_char != "\\":
                    if not in_string:
                        in_string = True
                        string_char = char
                    elif char == string_char:
                        in_string = False
                    col_idx += 1
                    continue
                if in_string:
                    col_idx += 1
                    continue

            if char == "/" and next_char == "/" and not in_block_comment:
                in_comment = True
                col_idx += 1
                continue
            if char == "/" and next_char == "*" and not in_comment:
                in_block_comment = True
                col_idx += 1
                continue
            if char == "*" and next_char == "/" and in_block_comment:
                in_block_comment = False
                col_idx += 2
                continue
            if in_comment or in_block_comment:
                col_idx += 1
                continue

            if char in _OPENERS:
                stack.append((char, line_idx + 1, col_idx + 1))
            elif char in _CLOSERS:
                last = stack.pop() if stack else None
                if last is None or last[0] != _CLOSERS[char]:
                    errors.append(
                        Diagnostic(
                            line_idx + 1,
                            col_idx + 1,
                            f"Unmatched closing bracket: {char}",
                        )
                    )
            col_idx += 1

        in_comment = False

    for char, line, column in stack:
        errors.append(Diagnostic(line, column, f"Unclosed bracket: {char}"))

    return errors


def scan_quote_parity(code: str) -> list[Diagnostic]:
    """Flag each line with an odd count of unescaped quotes of one kind."""
    errors: list[Diagnostic] = []
    for line_idx, line in enumerate(code.split("\n")):
        for pattern, message in _QUOTE_PARITY:
            if len(pattern.findall(line)) % 2 != 0:
                errors.append(Diagnostic(line_idx + 1, 1, message))
    return errors


def offset_to_position(text: str, offset: int) -> tuple[int, int]:
    """Translate a character offset into a 1-based (line, column)."""
    line = 1
    column = 1
    for char in text[: max(0, offset)]:
        if char == "\n":
            line += 1
            column = 1
        else:
            column += 1
    return line, column


_JSON_STRING_OR_CONSTANT = re.compile(r'"(?:\\.|[^"\\])*"|-?(?:NaN|Infinity)')


def check_json_syntax(code: str) -> list[Diagnostic]:
    """
    Strictly parse JSON; at most one diagnostic.

    ``NaN`` and ``Infinity`` are rejected, as in standard JSON.
    """

    def _reject_constant(name: str) -> None:
        offset = next(
            (
                m.start()
                for m in _JSON_STRING_OR_CONSTANT.finditer(code)
                if not m.group().startswith('"')
            ),
            0,
        )
        raise json.JSONDecodeError(f"Unexpected token {name}", code, offset)

    try:
        json.loads(code, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        line, column = offset_to_position(code, exc.pos)
        return [Diagnostic(line, column, exc.msg)]
    return []


def check_syntax_validity(
    code: str,
    language: Language | str,
    file_path: str | None = None,
) -> CheckResult:
    """
    Scan ``code`` according to its declared language.

    Args:
        code: The proposed content.
        language: Declared language.
        file_path: Used in messages only.

    Returns:
        BLOCK carrying every diagnostic found, or INFO.
    """
    kind = CheckKind.SYNTAX_VALIDITY
    try:
        lang = Language(str(language).lower())
    except ValueError:
        lang = None

    if lang is None or lang is Language.YAML:
        return CheckResult.ok(
            kind,
            f"Syntax scanning is not performed for {language}",
            details={"language": str(language), "scanned": False},
        )

    try:
        if lang.is_script():
            errors = scan_brackets(code) + scan_quote_parity(code)
        else:
            errors = check_json_syntax(code)
    except Exception as exc:
        logger.error("Syntax scan of %s failed: %s", file_path or "code", exc)
        return CheckResult.block(
            kind,
            f"Syntax check failed: {exc}",
            details={"error": str(exc)},
        )

    if errors:
        return CheckResult.block(
            kind,
            f"Syntax errors found in {file_path or 'code'}",
            details={
                "errors": [e.to_dict() for e in errors],
                "language": lang.value,
            },
        )

    return CheckResult.ok(kind, f"Syntax is valid for {lang.value}")


class SyntaxValidityCheck(BaseCheck):
    """Runs when an action carries content and a declared language."""

    @property
    def kind(self) -> CheckKind:
        return CheckKind.SYNTAX_VALIDITY

    def applies_to(self, action: AgentAction, config: GuardConfig) -> bool:
        return bool(action.content) and action.language is not None

    async def _run(
        self, action: AgentAction, config: GuardConfig
    ) -> list[CheckResult]:
        return [
            check_syntax_validity(
                action.content or "", action.language or "", action.target_path
            )
        ]
