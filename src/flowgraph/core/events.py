"""
Observer subscriptions.

Services that own mutable state (the group registry) take an EventEmitter
from whoever composes the application, instead of reaching for a
module-level instance.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventEmitter:
    """Named-event callback lists with on/off/emit."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def on(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Optional[Handler] = None) -> None:
        """Remove one handler, or every handler for ``event`` when none is given."""
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        # Copy so a handler may unsubscribe itself while being called.
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception:
                logger.exception(f"Handler for '{event}' failed")

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))
