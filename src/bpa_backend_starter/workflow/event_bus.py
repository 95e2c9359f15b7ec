"""In-process application event bus for workflow notifications.

After/Abort events are delivered on a worker pool so the thread that triggered
the engine call is never blocked by listener work. Before events are delivered
inline because the BPA client consumes the listeners' answers.

Delivery is fire-and-forget: a failing listener is logged with its traceback and
the event is dropped, never retried.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial

logger = logging.getLogger(__name__)

Listener = Callable[[object], object]


def _event_fields(event: object) -> dict[str, object]:
    fields: dict[str, object] = {"event": type(event).__name__}
    phase = getattr(event, "type", None)
    if phase is not None:
        fields["phase"] = getattr(phase, "value", phase)
    dto = getattr(event, "dto", None)
    if dto is not None:
        fields["key"] = getattr(dto, "key", None)
        fields["ref"] = getattr(dto, "ref", None)
    return fields


def _listener_name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or type(listener).__qualname__


class ApplicationEventBus:
    """Publish/subscribe keyed by event class."""

    def __init__(self, *, max_workers: int = 4, executor: ThreadPoolExecutor | None = None) -> None:
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="workflow-event"
        )
        self._listeners: list[tuple[type, Listener]] = []
        self._lock = threading.Lock()
        self._closed = False

    def subscribe(self, event_type: type, listener: Listener) -> None:
        with self._lock:
            self._listeners.append((event_type, listener))
        logger.debug(
            "Registered event listener",
            extra={"event": event_type.__name__, "listener": _listener_name(listener)},
        )

    def listeners_for(self, event: object) -> list[Listener]:
        with self._lock:
            return [fn for event_type, fn in self._listeners if isinstance(event, event_type)]

    def publish(self, event: object) -> list[Future[object]]:
        """Hand the event to every matching listener on the worker pool.

        Once the bus is shut down, events are logged and dropped.
        """

        futures: list[Future[object]] = []
        for listener in self.listeners_for(event):
            try:
                future = self._executor.submit(listener, event)
            except RuntimeError:
                if not self._closed:
                    raise
                logger.warning(
                    "Event bus is shut down; event dropped",
                    extra={"listener": _listener_name(listener), **_event_fields(event)},
                )
                continue
            future.add_done_callback(
                partial(_log_listener_failure, listener=_listener_name(listener), event=event)
            )
            futures.append(future)
        if not futures:
            logger.debug("No listener for event", extra=_event_fields(event))
        return futures

    def publish_sync(self, event: object) -> list[object]:
        """Deliver the event inline and return each listener's answer.

        Listener exceptions propagate to the publisher.
        """

        return [listener(event) for listener in self.listeners_for(event)]

    def shutdown(self, *, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)


def _log_listener_failure(future: Future[object], *, listener: str, event: object) -> None:
    if future.cancelled():
        logger.warning(
            "Workflow event delivery cancelled",
            extra={"listener": listener, **_event_fields(event)},
        )
        return
    exc = future.exception()
    if exc is None:
        return
    logger.error(
        "Workflow event listener failed; event dropped",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"listener": listener, **_event_fields(event)},
    )
