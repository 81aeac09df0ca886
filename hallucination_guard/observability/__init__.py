"""HallucinationGuard observability — validation listeners and exporters."""

from hallucination_guard.observability.listeners import Listener, ValidationListeners
from hallucination_guard.observability.stdout_exporter import StdoutExporter

__all__ = [
    "ValidationListeners",
    "Listener",
    "StdoutExporter",
]
