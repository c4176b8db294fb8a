"""Observer channel through which hosts follow session state changes."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

_LOGGER = logging.getLogger(__name__)

ALL = "*"

NEW_GAME = "new_game"
LOADED = "loaded"
CELL_CHANGED = "cell_changed"
EDIT_REJECTED = "edit_rejected"
HISTORY_CHANGED = "history_changed"
HINT_REVEALED = "hint_revealed"
COMPLETED = "completed"
SOLUTION_REVEALED = "solution_revealed"
PAUSED = "paused"
RESUMED = "resumed"

EVENTS = frozenset(
    {
        NEW_GAME,
        LOADED,
        CELL_CHANGED,
        EDIT_REJECTED,
        HISTORY_CHANGED,
        HINT_REVEALED,
        COMPLETED,
        SOLUTION_REVEALED,
        PAUSED,
        RESUMED,
    }
)

Listener = Callable[[str, dict[str, Any]], None]


class EventChannel:
    """Synchronous publish/subscribe hub.

    Listeners receive ``(event_name, payload)`` in subscription order. Exceptions
    raised by a listener propagate to the code that triggered the event.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, name: str, listener: Listener) -> None:
        if name != ALL and name not in EVENTS:
            raise ValueError(f"Unknown event: {name}")
        self._listeners[name].append(listener)

    def unsubscribe(self, name: str, listener: Listener) -> None:
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, name: str, /, **payload: Any) -> None:
        _LOGGER.debug("event %s %s", name, payload)
        for listener in list(self._listeners.get(name, ())) + list(self._listeners.get(ALL, ())):
            listener(name, payload)


__all__ = [
    "ALL",
    "CELL_CHANGED",
    "COMPLETED",
    "EDIT_REJECTED",
    "EVENTS",
    "EventChannel",
    "HINT_REVEALED",
    "HISTORY_CHANGED",
    "LOADED",
    "NEW_GAME",
    "PAUSED",
    "RESUMED",
    "SOLUTION_REVEALED",
]
