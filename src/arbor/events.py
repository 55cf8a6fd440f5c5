"""Build event dispatcher — synchronous notifications for build listeners.

Listeners subscribe to an event name during setup. ``dispatch()`` calls
them synchronously, in registration order. A failing listener is logged
and skipped so it cannot abort a render.

Thread safety:
    - Subscription is protected by a Lock
    - ``dispatch()`` iterates over a tuple snapshot of the listeners
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("arbor.events")

# Fired by RenderPipeline with (result, node)
AFTER_NODE_RENDERED = "after_node_rendered"


class EventDispatcher:
    """Named-event registry with in-order, fire-and-forget dispatch.

    Usage::

        events = EventDispatcher()
        events.subscribe(AFTER_NODE_RENDERED, lambda result, node: ...)
        events.dispatch(AFTER_NODE_RENDERED, result, node)
    """

    __slots__ = ("_listeners", "_lock")

    def __init__(self) -> None:
        self._listeners: dict[str, tuple[Callable[..., Any], ...]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Register *handler* for *event*. Handlers run in subscription order."""
        with self._lock:
            self._listeners[event] = (*self._listeners.get(event, ()), handler)

    def listeners(self, event: str) -> tuple[Callable[..., Any], ...]:
        return self._listeners.get(event, ())

    def dispatch(self, event: str, *args: Any) -> int:
        """Call every handler of *event* with *args*.

        Returns:
            The number of handlers that completed without raising.
        """
        delivered = 0
        for handler in self._listeners.get(event, ()):
            try:
                handler(*args)
            except Exception:
                logger.exception("Listener %r for %r failed", handler, event)
            else:
                delivered += 1
        return delivered
