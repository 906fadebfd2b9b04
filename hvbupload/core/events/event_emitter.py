"""Event emitter implementation using Observer Pattern."""
import logging
from typing import List, Callable, Any

logger = logging.getLogger('hvbupload.events')


class EventEmitter:
    """
    Single subscription point for upload events.

    Listeners receive every event object and dispatch on its type,
    so progress, completion and failure share one channel.
    """

    def __init__(self):
        """Initializes event emitter."""
        self._listeners: List[Callable[[Any], None]] = []

    def subscribe(self, listener: Callable[[Any], None]) -> 'EventEmitter':
        """Registers a listener."""
        self._listeners.append(listener)
        return self

    def unsubscribe(self, listener: Callable[[Any], None]) -> 'EventEmitter':
        """Removes a listener."""
        self._listeners = [cb for cb in self._listeners if cb != listener]
        return self

    def emit(self, event: Any) -> None:
        """Emits an event to all listeners in registration order."""
        logger.debug(f"Emitting {type(event).__name__} to {len(self._listeners)} listener(s)")
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)
