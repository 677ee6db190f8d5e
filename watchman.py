"""
Watchman: an observable attribute store with undo stacks.

One Watchman instance owns four cooperating parts:

- an AttributeStore with the current name -> value mapping
- an EventBus notified synchronously after every change
- an OperationRegistry of named operations that double as events
- a StateStack of remembered snapshots and per-property histories

Every mutating method triggers the bus before it returns and returns the
instance, so calls can be chained. ``off``/``trigger`` on an unknown event
name and ``invoke`` of an unknown operation return None instead.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Mapping
from typing import Any, ContextManager, Optional, Union

from attributes import AttributeStore
from events import CHANGE, REMEMBER, RESTORE, Event, EventBus, Subscriber
from operations import Operation, OperationRegistry
from states import MISSING, StateStack

logger = logging.getLogger(__name__)


class Watchman:
    CHANGE = CHANGE
    REMEMBER = REMEMBER
    RESTORE = RESTORE

    def __init__(self, attributes: Optional[Mapping[str, Any]] = None, *, thread_safe: bool = False) -> None:
        self._attributes = AttributeStore(attributes)
        self._events = EventBus()
        self._operations = OperationRegistry()
        self._states = StateStack()
        # RLock: subscribers may call back into the same instance.
        self._lock: Optional[threading.RLock] = threading.RLock() if thread_safe else None

    def _guard(self) -> ContextManager[Any]:
        return self._lock if self._lock is not None else contextlib.nullcontext()

    def __repr__(self) -> str:
        return f"Watchman(attributes={len(self._attributes)})"

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def get(self, prop: Optional[str] = None) -> Any:
        """Value of ``prop`` (None when absent), or a copy of every attribute."""
        with self._guard():
            if prop is not None:
                return self._attributes.get(prop)
            return self._attributes.snapshot()

    def set(self, prop: Union[str, Mapping[str, Any]], *args: Any) -> Watchman:
        """Sets one attribute, ``set(name, value, *extra)``, or merges many, ``set(mapping, *extra)``.

        Fires ``change`` with ``prop`` None for the bulk form; ``extra`` goes
        to the subscribers after the event.
        """
        with self._guard():
            if isinstance(prop, str):
                if not args:
                    raise TypeError("set() with a property name requires a value.")
                value, *extra = args
                self._attributes.put(prop, value)
                event = Event(CHANGE, prop, value)
            elif isinstance(prop, Mapping):
                extra = list(args)
                self._attributes.merge(prop)
                event = Event(CHANGE, None, prop)
            else:
                raise TypeError(f"set() expects a property name or a mapping, got {type(prop).__name__}.")

            self.trigger(event, *extra)
            return self

    def unset(self, prop: Optional[str] = None, *args: Any) -> Watchman:
        """Deletes one attribute or all of them.

        The ``change`` event data tells whether the attribute existed; clearing
        everything always reports True.
        """
        with self._guard():
            if prop is not None:
                existed = self._attributes.delete(prop)
            else:
                self._attributes.clear()
                existed = True

            self.trigger(Event(CHANGE, prop, existed), *args)
            return self

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event_name: str, callback: Subscriber) -> Watchman:
        """Subscribes ``callback(watchman, event, *args)`` to ``event_name``."""
        with self._guard():
            self._events.on(event_name, callback)
            return self

    def off(self, event_name: str, callback: Optional[Subscriber] = None) -> Optional[Watchman]:
        with self._guard():
            if not self._events.off(event_name, callback):
                return None
            return self

    def trigger(self, event: Union[str, Event], *args: Any) -> Optional[Watchman]:
        """Notifies subscribers of an event name or a pre-built ``Event``.

        Other record types raise TypeError.
        """
        with self._guard():
            if not self._events.trigger(self, event, *args):
                return None
            return self

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register(self, event_name: str, operation: Operation) -> Watchman:
        """Associates ``operation(watchman, *args)`` with ``event_name``."""
        with self._guard():
            self._operations.register(event_name, operation)
            return self

    def invoke(self, event_name: str, *args: Any) -> Any:
        """Runs the operation, then triggers ``event_name`` with the same args.

        Returns whatever the operation returned, or None if nothing is
        registered (in which case no event fires).
        """
        with self._guard():
            operation = self._operations.lookup(event_name)
            if operation is None:
                logger.debug("No operation registered under '%s'", event_name)
                return None

            result = operation(self, *args)
            self.trigger(event_name, *args)
            return result

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def remember(self, prop: Optional[str] = None, *args: Any) -> Watchman:
        """Pushes the current value of ``prop``, or a snapshot of everything."""
        with self._guard():
            if prop is not None:
                value = self._attributes.get(prop, MISSING)
                self._states.push_value(prop, value)
                if value is MISSING:
                    value = None
            else:
                value = dict(self._states.push_snapshot(self._attributes.snapshot()))

            self.trigger(Event(REMEMBER, prop, value), *args)
            return self

    def restore(self, prop: Optional[str] = None, *args: Any) -> Watchman:
        """Pops the last remembered value/snapshot and applies it if there was one.

        A remembered None is written back; a property that was absent when
        remembered is left as it is.
        """
        with self._guard():
            if prop is not None:
                value = self._states.pop_value(prop)
                if value is MISSING:
                    value = None
                else:
                    self._attributes.put(prop, value)
            else:
                value = self._states.pop_snapshot()
                if value is not None:
                    self._attributes.replace(value)
                    value = dict(value)

            self.trigger(Event(RESTORE, prop, value), *args)
            return self

    def states(self, prop: Optional[str] = None) -> list[Any]:
        """Copies of the remembered history, oldest first."""
        with self._guard():
            if prop is not None:
                return self._states.history(prop)
            return self._states.snapshots()
