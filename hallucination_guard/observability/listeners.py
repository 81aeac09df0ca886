"""
Validation Listeners
~~~~~~~~~~~~~~~~~~~~

Caller-owned registry of callbacks notified after every validation.

A registry is created by the caller and handed to the guard; there is
no process-wide subscriber set. Registration returns a handle that is
the only way to remove the listener again.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable

from hallucination_guard.core.models import AgentAction, ValidationResult
from hallucination_guard.exceptions import ListenerNotRegisteredError

__all__ = ["ValidationListeners", "Listener"]

logger = logging.getLogger(__name__)

Listener = Callable[[AgentAction, ValidationResult], None]


class ValidationListeners:
    """
    Thread-safe set of validation listeners.

    Listeners are called in registration order. A listener that raises
    is logged and skipped; it never affects the validation outcome or
    the other listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, Listener] = {}
        self._handles = itertools.count(1)
        self._lock = threading.Lock()

    def register(self, listener: Listener) -> int:
        """
        Register a listener.

        Args:
            listener: Called as ``listener(action, result)``.

        Returns:
            Handle to pass to ``unregister()``.
        """
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        with self._lock:
            handle = next(self._handles)
            self._listeners[handle] = listener
        logger.debug("Registered listener %d: %r", handle, listener)
        return handle

    def unregister(self, handle: int) -> None:
        """
        Remove a previously registered listener.

        Raises:
            ListenerNotRegisteredError: If the handle is unknown or was
                already unregistered.
        """
        with self._lock:
            if handle not in self._listeners:
                raise ListenerNotRegisteredError(
                    f"No listener registered under handle {handle!r}",
                    details={"handle": handle},
                )
            del self._listeners[handle]
        logger.debug("Unregistered listener %d", handle)

    def notify(self, action: AgentAction, result: ValidationResult) -> None:
        """Deliver a validation outcome to every listener."""
        with self._lock:
            listeners = list(self._listeners.items())

        for handle, listener in listeners:
            try:
                listener(action, result)
            except Exception as exc:
                logger.error("Listener %d (%r) failed: %s", handle, listener, exc)

    def clear(self) -> None:
        """Remove every listener."""
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._listeners
