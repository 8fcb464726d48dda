"""In-process event bus for job lifecycle events."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventBus:
    """Named events with listeners called in registration order."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}

    def listen(self, event: str, callback: Callable) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def stop_listening(self, event: str, callback: Callable) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        listeners = self._listeners.get(event, [])
        if callback not in listeners:
            return False
        listeners.remove(callback)
        return True

    def trigger(self, event: str, *args: Any) -> List[Any]:
        """Call every listener of ``event`` and return their results."""
        listeners = list(self._listeners.get(event, []))
        logger.debug("Triggering %s for %d listener(s)", event, len(listeners))
        return [callback(*args) for callback in listeners]
