"""
Event dispatch port.

Adapters dispatch order payment events through this protocol; the
composition root decides where they go (in-process listeners by default).
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable


Handler = Callable[[Any], Union[Awaitable[None], None]]


@runtime_checkable
class EventDispatcher(Protocol):
    async def dispatch(self, event: Any) -> None: ...

    def subscribe(self, event_type: type, handler: Handler) -> None: ...
