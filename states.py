"""
State stack: remembered snapshots of the whole mapping and per-property
value histories. Both are unbounded LIFO stacks.

A property that was absent when remembered is stored as MISSING, which is
also what ``pop_value`` returns for an empty history. ``None`` is an ordinary
remembered value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class StateStack:
    def __init__(self) -> None:
        self._snapshots: list[dict[str, Any]] = []
        self._properties: dict[str, list[Any]] = {}

    def push_snapshot(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        """Stores a shallow copy of ``attributes`` and returns it."""
        snapshot = dict(attributes)
        self._snapshots.append(snapshot)
        logger.debug("Remembered snapshot #%d (%d keys)", len(self._snapshots), len(snapshot))
        return snapshot

    def pop_snapshot(self) -> Optional[dict[str, Any]]:
        # Popping an empty stack is not an error: there is simply nothing to restore.
        if not self._snapshots:
            logger.debug("No snapshot to restore")
            return None
        return self._snapshots.pop()

    def push_value(self, prop: str, value: Any) -> None:
        history = self._properties.setdefault(prop, [])
        history.append(value)
        logger.debug("Remembered '%s' (history depth %d)", prop, len(history), extra={"prop": prop})

    def pop_value(self, prop: str) -> Any:
        """Last remembered value of ``prop``, or MISSING."""
        history = self._properties.get(prop)
        if not history:
            logger.debug("No remembered value for '%s'", prop, extra={"prop": prop})
            return MISSING
        return history.pop()

    def snapshots(self) -> list[dict[str, Any]]:
        """Copies of every snapshot, oldest first."""
        return [dict(snapshot) for snapshot in self._snapshots]

    def history(self, prop: str) -> list[Any]:
        # Absent entries read as None outside the stack.
        return [None if value is MISSING else value for value in self._properties.get(prop, [])]
