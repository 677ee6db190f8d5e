"""
Registry of named operations ("custom events").

An operation is looked up here and run by the owning Watchman, which then
triggers an event of the same name.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from events import validate_event_name

logger = logging.getLogger(__name__)

Operation = Callable[..., Any]


class OperationRegistry:
    """At most one operation per event name; re-registering overwrites."""

    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}

    def register(self, event_name: str, operation: Operation) -> None:
        validate_event_name(event_name)
        if not callable(operation):
            raise TypeError("operation must be callable.")
        if event_name in self._operations:
            logger.debug("Replacing operation registered under '%s'", event_name)
        self._operations[event_name] = operation

    def lookup(self, event_name: str) -> Optional[Operation]:
        return self._operations.get(event_name)
