"""
Stdout Exporter
~~~~~~~~~~~~~~~

Writes validation outcomes as JSON lines to stdout.
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime

from hallucination_guard.core.models import AgentAction, ValidationResult

__all__ = ["StdoutExporter"]


class StdoutExporter:
    """
    Listener that writes each validation outcome as a JSON line.

    Each entry is serialized as a single JSON line for easy piping
    to log aggregators. Register it with ``ValidationListeners``.
    """

    def __init__(
        self,
        stream: object | None = None,
        pretty: bool = False,
        include_content: bool = False,
    ) -> None:
        self._stream = stream or sys.stdout
        self._pretty = pretty
        self._include_content = include_content

    def export(self, action: AgentAction, result: ValidationResult) -> None:
        """Write the outcome as a JSON line to the output stream."""
        action_data = action.to_dict()
        if not self._include_content:
            action_data.pop("content", None)
        data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "action": action_data,
            "result": result.to_dict(),
        }
        if self._pretty:
            line = json.dumps(data, indent=2, default=str)
        else:
            line = json.dumps(data, default=str)
        self._stream.write(line + "\n")  # type: ignore[union-attr]
        self._stream.flush()  # type: ignore[union-attr]

    def __call__(self, action: AgentAction, result: ValidationResult) -> None:
        self.export(action, result)
