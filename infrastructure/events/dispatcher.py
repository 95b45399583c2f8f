"""In-process implementation of the EventDispatcher port.

Single-process only. Handlers registered for an event type also receive
events of its subclasses and are awaited sequentially in registration order.
"""
from __future__ import annotations

import inspect
from typing import Any, Dict, List

from application.ports.events import EventDispatcher, Handler
from core.logging_config import get_logger


logger = get_logger(__name__)


class InMemoryEventDispatcher(EventDispatcher):
    def __init__(self) -> None:
        self._handlers: Dict[type, List[Handler]] = {}

    def subscribe(self, event_type: type, handler: Handler) -> None:  # type: ignore[override]
        self._handlers.setdefault(event_type, []).append(handler)

    def handlers_for(self, event: Any) -> List[Handler]:
        matched: List[Handler] = []
        for event_type, handlers in self._handlers.items():
            if isinstance(event, event_type):
                matched.extend(handlers)
        return matched

    async def dispatch(self, event: Any) -> None:  # type: ignore[override]
        handlers = self.handlers_for(event)
        logger.info(
            "domain_event_dispatched",
            event_type=type(event).__name__,
            event_id=getattr(event, "event_id", None),
            handlers=len(handlers),
        )
        for h in handlers:
            result = h(event)
            if inspect.isawaitable(result):
                await result

    def clear(self) -> None:
        self._handlers.clear()
