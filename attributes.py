"""
Attribute store.

Keeps the name -> value mapping isolated from the event/state logic, the way
a repository layer keeps storage away from the service that coordinates it.
"""

from collections.abc import Mapping
from typing import Any, Optional


class AttributeStore:
    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        # Copy so the caller's mapping is never aliased.
        self._attributes: dict[str, Any] = dict(initial) if initial is not None else {}

    def get(self, prop: str, default: Any = None) -> Any:
        return self._attributes.get(prop, default)

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy of the whole mapping."""
        return dict(self._attributes)

    def put(self, prop: str, value: Any) -> None:
        self._attributes[prop] = value

    def merge(self, values: Mapping[str, Any]) -> None:
        # Existing keys are overwritten.
        self._attributes.update(values)

    def delete(self, prop: str) -> bool:
        """Removes ``prop``; True when it existed."""
        if prop not in self._attributes:
            return False
        del self._attributes[prop]
        return True

    def clear(self) -> None:
        self._attributes = {}

    def replace(self, values: Mapping[str, Any]) -> None:
        self._attributes = dict(values)

    def __len__(self) -> int:
        return len(self._attributes)
