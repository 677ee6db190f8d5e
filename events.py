"""
Event records and the synchronous pub/sub bus behind a Watchman instance.

Built-in lifecycle events (change/remember/restore) are published through
the same bus as caller-defined ones.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, Optional, Union

logger = logging.getLogger(__name__)

CHANGE = "change"
REMEMBER = "remember"
RESTORE = "restore"

# Subscribers receive the owning instance first, then the event, then extras.
Subscriber = Callable[..., Any]


@dataclass(frozen=True)
class Event:
    """Record delivered to subscribers."""

    type: str
    prop: Optional[str] = None
    data: Any = None


def validate_event_name(event_name: str) -> None:
    if not isinstance(event_name, str) or not event_name:
        raise ValueError("event_name must be a non-empty string.")


class EventBus:
    """Simple synchronous pub/sub event bus.

    The bus does not know who owns it: ``trigger`` takes the receiver that is
    passed to every subscriber as its first argument.
    """

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, list[Subscriber]] = defaultdict(list)

    def on(self, event_name: str, callback: Subscriber) -> None:
        # Duplicates are kept; each registration gets its own call.
        validate_event_name(event_name)
        if not callable(callback):
            raise TypeError("callback must be callable.")
        self._subscribers[event_name].append(callback)
        logger.debug("Subscribed %r to '%s'", callback, event_name, extra={"event": event_name})

    def off(self, event_name: str, callback: Optional[Subscriber] = None) -> bool:
        """Removes one callback (every copy of it) or the whole list.

        Returns False when nothing was ever registered under ``event_name``.
        """
        callbacks = self._subscribers.get(event_name)
        if callbacks is None:
            return False

        if callback is None:
            del self._subscribers[event_name]
        else:
            # An emptied list stays registered, so the name remains known.
            # Equality, not identity: each `obj.method` access builds a new bound method.
            self._subscribers[event_name] = [cb for cb in callbacks if cb != callback]
        logger.debug("Unsubscribed %r from '%s'", "all" if callback is None else callback, event_name)
        return True

    def trigger(self, receiver: Any, event: Union[str, Event], *args: Any) -> bool:
        """Delivers ``event`` to its subscribers in registration order.

        ``event`` is an event name or an ``Event`` record; anything else raises
        TypeError. Returns False (and calls nothing) when the name is unknown.
        """
        if isinstance(event, Event):
            name = event.type
        elif isinstance(event, str):
            name = event
        else:
            raise TypeError(f"trigger() expects an event name or an Event, got {type(event).__name__}.")

        callbacks = self._subscribers.get(name)
        if callbacks is None:
            return False

        if isinstance(event, str):
            event = Event(type=name)

        # Iterate over a copy: changes made by a subscriber apply to the next dispatch.
        snapshot = list(callbacks)
        logger.debug(
            "Dispatching '%s' to %d subscriber(s)", name, len(snapshot),
            extra={"event": name, "subscribers": len(snapshot)},
        )
        for callback in snapshot:
            callback(receiver, event, *args)
        return True
