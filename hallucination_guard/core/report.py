"""
Validation Report
~~~~~~~~~~~~~~~~~

Renders a ValidationResult as a human-readable breakdown, used by
``HallucinationGuard.explain()`` and the CLI.
"""

from __future__ import annotations

from hallucination_guard.core.models import AgentAction, CheckResult, ValidationResult
from hallucination_guard.core.severity import CheckKind, Severity

__all__ = ["render_report", "verdict_label"]

_SEVERITY_SYMBOL = {
    Severity.INFO: "✅",
    Severity.WARN: "⚠️",
    Severity.BLOCK: "🚫",
}


def verdict_label(result: ValidationResult) -> str:
    """Collapse a result into one of the four verdict labels."""
    if not result.passed:
        return "BLOCKED"
    if result.requires_approval:
        return "APPROVAL REQUIRED"
    if result.warnings:
        return "WARNED"
    return "ALLOWED"


def _status(check: CheckResult) -> str:
    if check.is_blocking:
        return "BLOCK"
    if check.requires_approval:
        return "APPROVAL"
    if check.severity is Severity.WARN:
        return "WARN"
    return "PASS"


def _detail_lines(check: CheckResult) -> list[str]:
    details = check.details or {}
    lines: list[str] = []
    for error in details.get("errors", []):
        if "line" in error:
            lines.append(
                f"       line {error['line']}, col {error['column']}: {error['message']}"
            )
        elif "rule" in error:
            lines.append(f"       [{error['rule']}] {error['message']}")
    for warning in details.get("warnings", []):
        lines.append(f"       [{warning['rule']}] {warning['message']}")
    for path in details.get("tried_paths", []):
        lines.append(f"       tried: {path}")
    return lines


def render_report(action: AgentAction, result: ValidationResult) -> str:
    """
    Render a validation outcome for display.

    Args:
        action: The validated action.
        result: Its ValidationResult.

    Returns:
        Multi-line report string.
    """
    rows: list[str] = []
    seen = {check.kind for check in result.results}
    for kind in CheckKind:
        if kind not in seen:
            rows.append(f"  ⏭  {kind.value:<20s} SKIP   (not run)")
            continue
        for check in result.results:
            if check.kind is not kind:
                continue
            sym = _SEVERITY_SYMBOL[check.severity]
            rows.append(f"  {sym} {kind.value:<20s} {_status(check):<8s} {check.message}")
            rows.extend(_detail_lines(check))

    label = verdict_label(result)
    sep = "─" * 45
    lines = [
        sep,
        "HALLUCINATION GUARD REPORT",
        sep,
        f"Action:      {action.kind.value} → {action.target_path or '(no target)'}",
    ]
    if action.source_path:
        lines.append(f"Source:      {action.source_path}")
    if action.language is not None:
        lines.append(f"Language:    {action.language}")
    lines.extend(
        [
            sep,
            f"VERDICT: {label}",
            sep,
            "CHECK RESULTS:",
            *rows,
            "",
            "REASON:",
        ]
    )

    if label == "BLOCKED":
        lines.extend(f"  {reason}" for reason in result.blocking_reasons or [])
    elif label == "APPROVAL REQUIRED":
        lines.extend(f"  {reason}" for reason in result.approval_reasons)
    elif label == "WARNED":
        lines.extend(f"  {warning}" for warning in result.warnings or [])
    else:
        lines.append("  All checks passed.")

    lines.append("")
    lines.append("HOW TO FIX:")
    if label == "BLOCKED":
        lines.append("  Option 1 — Point the action at files and packages that exist.")
        lines.append("  Option 2 — Fix the reported syntax errors and policy violations.")
        lines.append("  Option 3 — Disable a check with guard.set_check_enabled().")
    elif label == "APPROVAL REQUIRED":
        lines.append("  Option 1 — Get a human reviewer to approve this change.")
        lines.append("  Option 2 — Target a path outside the approval patterns.")
    elif label == "WARNED":
        lines.append("  No action required — review the warnings above.")
    else:
        lines.append("  No action needed — this action will be allowed.")

    lines.append(sep)
    return "\n".join(lines)
