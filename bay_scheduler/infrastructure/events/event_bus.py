"""
Event bus implementation for domain event publishing and subscription.

The event bus routes domain events raised by the reschedule protocol and
bay management to registered handlers, typically view refreshes and
operator notifications.
"""

import asyncio
import functools
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from ...core.observability import get_logger
from ...domain.scheduling.events import DomainEvent

logger = get_logger(__name__)

EventHandler = Callable[[DomainEvent], Any]


class EventBusInterface(ABC):
    """
    Abstract interface for event bus implementations.

    Defines the contract for publishing events and subscribing to event types.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to all registered handlers.

        Args:
            event: Domain event to publish
        """

    @abstractmethod
    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe a handler to a specific event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Handler function to call when event is published
        """

    @abstractmethod
    def unsubscribe(
        self, event_type: type[DomainEvent], handler: EventHandler
    ) -> None:
        """
        Unsubscribe a handler from a specific event type.

        Args:
            event_type: Type of event to unsubscribe from
            handler: Handler function to remove
        """


class InMemoryEventBus(EventBusInterface):
    """
    In-memory implementation of event bus.

    Handlers run in subscription order on the publishing thread. A failing
    handler is logged and the remaining handlers still run.
    """

    def __init__(self, max_history_size: int = 1000):
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(
            list
        )
        self._event_history: list[DomainEvent] = []
        self._max_history_size = max_history_size
        self._pending_tasks: set[asyncio.Task] = set()

    def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event synchronously to all registered handlers.

        Coroutine handlers are scheduled on the running loop when there is
        one and skipped with a warning otherwise. Scheduled handlers are
        held until they finish and their failures are logged.

        Args:
            event: Domain event to publish
        """
        self._add_to_history(event)

        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers registered", event_type=event_type.__name__)
            return

        logger.info(
            "Publishing event",
            event_type=event_type.__name__,
            handler_count=len(handlers),
        )

        for handler in handlers:
            self._safe_handle(handler, event)

    async def publish_async(self, event: DomainEvent) -> None:
        """
        Publish a domain event, awaiting coroutine handlers.

        Args:
            event: Domain event to publish
        """
        self._add_to_history(event)

        for handler in list(self._handlers.get(type(event), [])):
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    event_type=type(event).__name__,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                )

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        if handler in self._handlers[event_type]:
            logger.warning(
                "Handler already subscribed",
                event_type=event_type.__name__,
                handler=getattr(handler, "__qualname__", repr(handler)),
            )
            return
        self._handlers[event_type].append(handler)

    def unsubscribe(
        self, event_type: type[DomainEvent], handler: EventHandler
    ) -> None:
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
        else:
            logger.warning(
                "Handler not found",
                event_type=event_type.__name__,
                handler=getattr(handler, "__qualname__", repr(handler)),
            )

    def clear_handlers(self, event_type: type[DomainEvent] | None = None) -> None:
        """
        Clear event handlers.

        Args:
            event_type: Optional event type to clear handlers for. If None, clears all.
        """
        if event_type:
            self._handlers.pop(event_type, None)
        else:
            self._handlers.clear()

    def get_handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    def get_event_history(
        self, event_type: type[DomainEvent] | None = None
    ) -> list[DomainEvent]:
        """
        Get history of published events.

        Args:
            event_type: Optional event type to filter by

        Returns:
            List of published events, oldest first
        """
        if event_type:
            return [
                event for event in self._event_history if type(event) is event_type
            ]
        return self._event_history.copy()

    def clear_event_history(self) -> None:
        self._event_history.clear()

    def _add_to_history(self, event: DomainEvent) -> None:
        """Add event to history, maintaining size limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._max_history_size:
            self._event_history.pop(0)

    def _safe_handle(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            result = handler(event)
            if asyncio.iscoroutine(result):
                try:
                    task = asyncio.get_running_loop().create_task(result)
                except RuntimeError:
                    result.close()
                    logger.warning(
                        "Async handler skipped outside an event loop",
                        event_type=type(event).__name__,
                    )
                else:
                    self._pending_tasks.add(task)
                    task.add_done_callback(
                        functools.partial(self._on_handler_done, handler, event)
                    )
        except Exception as e:
            logger.error(
                "Event handler failed",
                event_type=type(event).__name__,
                handler=getattr(handler, "__qualname__", repr(handler)),
                error=str(e),
            )

    def _on_handler_done(
        self, handler: EventHandler, event: DomainEvent, task: asyncio.Task
    ) -> None:
        self._pending_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Event handler failed",
                event_type=type(event).__name__,
                handler=getattr(handler, "__qualname__", repr(handler)),
                error=str(error),
            )
