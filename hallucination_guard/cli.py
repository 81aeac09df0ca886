"""
hallucination-guard CLI
~~~~~~~~~~~~~~~~~~~~~~~

Command-line interface for hallucination-guard.

Exit status of ``validate``: 0 when the action passes, 1 when it is
blocked, 3 when it requires approval. Configuration and policy errors
exit with 2.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

EXIT_BLOCKED = 1
EXIT_USAGE = 2
EXIT_APPROVAL = 3

_EXTENSION_LANGUAGES = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    from hallucination_guard.core.severity import ActionKind

    parser = argparse.ArgumentParser(
        prog="hallucination-guard",
        description="hallucination-guard — Validate agent file actions before they apply",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    subparsers = parser.add_subparsers(dest="command")

    # validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Validate one proposed action"
    )
    validate_parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Project root (default: current directory)",
    )
    validate_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a guard configuration YAML file",
    )
    validate_parser.add_argument(
        "--policy",
        type=str,
        default=None,
        help="Path to a policy document (YAML or JSON)",
    )
    validate_parser.add_argument(
        "--kind",
        type=str,
        required=True,
        choices=[k.value for k in ActionKind],
        help="Action kind",
    )
    validate_parser.add_argument(
        "--target",
        type=str,
        default=None,
        help="Project-relative target path",
    )
    validate_parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Project-relative source path (moves)",
    )
    validate_parser.add_argument(
        "--content-file",
        type=str,
        default=None,
        help="File holding the proposed content ('-' for stdin)",
    )
    validate_parser.add_argument(
        "--language",
        type=str,
        default=None,
        help="Declared language of the content (default: from the target extension)",
    )
    validate_parser.add_argument(
        "--dependency",
        action="append",
        default=None,
        help="Package the action adds (repeatable)",
    )
    validate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a report",
    )

    # check-syntax command
    syntax_parser = subparsers.add_parser(
        "check-syntax", help="Run the lexical syntax scan on a file"
    )
    syntax_parser.add_argument("file", type=str, help="File to scan")
    syntax_parser.add_argument(
        "--language",
        type=str,
        default=None,
        help="Declared language (default: from the file extension)",
    )

    # version command
    subparsers.add_parser("version", help="Show version")

    args = parser.parse_args(argv)

    if args.version or args.command == "version":
        from hallucination_guard import __version__

        print(f"hallucination-guard {__version__}")
        return

    if args.command == "validate":
        _run_validate(args)
    elif args.command == "check-syntax":
        _run_check_syntax(args)
    else:
        parser.print_help()
        sys.exit(EXIT_USAGE)


def _guess_language(path: str | None) -> str | None:
    if not path:
        return None
    return _EXTENSION_LANGUAGES.get(os.path.splitext(path)[1].lower())


def _read_content(path: str | None) -> str | None:
    if path is None:
        return None
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _make_guard(args: argparse.Namespace) -> Any:
    """Create a HallucinationGuard from config, policy and root flags."""
    from hallucination_guard.core.guard import HallucinationGuard
    from hallucination_guard.policy.loader import load_policy

    if args.config:
        guard = HallucinationGuard.from_config(args.config)
    else:
        guard = HallucinationGuard.default(args.root)
    if args.policy:
        guard.update_policy(load_policy(args.policy))
    return guard


def _run_validate(args: argparse.Namespace) -> None:
    """Run the validate command."""
    from hallucination_guard.core.models import AgentAction
    from hallucination_guard.core.report import render_report
    from hallucination_guard.exceptions import GuardError

    try:
        guard = _make_guard(args)
        content = _read_content(args.content_file)
    except GuardError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except (OSError, ValueError) as exc:
        print(f"Error: Cannot read content: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    language = args.language
    if language is None and content is not None:
        language = _guess_language(args.target)

    action = AgentAction(
        kind=args.kind,
        target_path=args.target,
        source_path=args.source,
        content=content,
        language=language,
        dependencies=args.dependency,
    )
    result = guard.validate(action)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(render_report(action, result))

    if not result.passed:
        sys.exit(EXIT_BLOCKED)
    if result.requires_approval:
        sys.exit(EXIT_APPROVAL)


def _run_check_syntax(args: argparse.Namespace) -> None:
    """Run the check-syntax command."""
    from hallucination_guard.checks.syntax import check_syntax_validity

    language = args.language or _guess_language(args.file)
    if language is None:
        print(
            f"Error: Cannot infer the language of {args.file}; pass --language",
            file=sys.stderr,
        )
        sys.exit(EXIT_USAGE)

    try:
        content = _read_content(args.file)
    except (OSError, ValueError) as exc:
        print(f"Error: Cannot read {args.file}: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    result = check_syntax_validity(content or "", language, args.file)
    print(result.message)
    for error in (result.details or {}).get("errors", []):
        print(f"  {args.file}:{error['line']}:{error['column']}: {error['message']}")

    if not result.passed:
        sys.exit(EXIT_BLOCKED)


if __name__ == "__main__":
    main()
