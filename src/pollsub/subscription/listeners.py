"""Registration of message and error listeners."""

import logging
from typing import Any, Callable

from pollsub.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MESSAGE = "message"
ERROR = "error"
EVENT_KINDS = (MESSAGE, ERROR)


class ListenerHandle:
    """
    A registered listener. Closing the handle unregisters it.

    Handles are context managers, both sync and async:

        async with subscription.listen(on_message):
            await stop.wait()
    """

    def __init__(self, registry: "ListenerRegistry", kind: str, callback: Callable[..., Any]):
        self.kind = kind
        self.callback = callback
        self._registry = registry
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._registry.remove(self)

    def __enter__(self) -> "ListenerHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "ListenerHandle":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<ListenerHandle {self.kind} {state}>"


class ListenerRegistry:
    """
    Counts message listeners and reports the 0 -> 1 and 1 -> 0 transitions.

    Error listeners are kept alongside but never count as consumers.
    """

    def __init__(self, on_open: Callable[[], None], on_close: Callable[[], None]):
        self._on_open = on_open
        self._on_close = on_close
        self._handles: dict[str, list[ListenerHandle]] = {kind: [] for kind in EVENT_KINDS}

    @property
    def active_count(self) -> int:
        """Number of registered message listeners."""
        return len(self._handles[MESSAGE])

    @property
    def listening(self) -> bool:
        return self.active_count > 0

    def add(self, kind: str, callback: Callable[..., Any]) -> ListenerHandle:
        if kind not in self._handles:
            raise InvalidArgumentError(f"Unknown event kind {kind!r}, expected one of {EVENT_KINDS}")
        if not callable(callback):
            raise InvalidArgumentError("A listener must be callable.")

        handle = ListenerHandle(self, kind, callback)
        self._handles[kind].append(handle)

        if kind == MESSAGE and self.active_count == 1:
            logger.debug("First message listener registered")
            self._on_open()
        return handle

    def remove(self, handle: ListenerHandle) -> None:
        handles = self._handles.get(handle.kind, [])
        if handle not in handles:
            return
        handles.remove(handle)
        handle.closed = True

        if handle.kind == MESSAGE and self.active_count == 0:
            logger.debug("Last message listener removed")
            self._on_close()

    def listeners(self, kind: str) -> tuple[Callable[..., Any], ...]:
        """Snapshot of the callbacks registered for kind."""
        return tuple(handle.callback for handle in self._handles[kind])

    def clear(self) -> None:
        """Unregister every listener."""
        for kind in EVENT_KINDS:
            for handle in list(self._handles[kind]):
                self.remove(handle)
