"""
Canales de eventos de dominio.

Los handlers se registran explícitamente al arrancar (ver container.py).
Un handler que falla nunca afecta a la acción que publicó el evento:
el error se registra en el log y se sigue con el resto.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable

from core.domain.events.task_completed import TaskCompleted
from core.domain.ports.event_channel import EventChannel, EventHandler

logger = logging.getLogger(__name__)


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class _HandlerRegistry(EventChannel):
    def __init__(self, handlers: Iterable[EventHandler] = ()) -> None:
        self._handlers: list[EventHandler] = list(handlers)

    @property
    def handlers(self) -> tuple[EventHandler, ...]:
        return tuple(self._handlers)

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)


class SyncEventChannel(_HandlerRegistry):
    """Despacha en el mismo hilo, en orden de registro."""

    def publish(self, event: TaskCompleted) -> None:
        for handler in self._handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    f"❌ Handler {_handler_name(handler)} falló con "
                    f"{type(event).__name__} de la tarea {event.task.id}"
                )


class ThreadPoolEventChannel(_HandlerRegistry):
    """
    Despacha cada handler en un ThreadPoolExecutor propio.

    `publish` retorna sin esperar a los handlers.
    """

    def __init__(
        self, handlers: Iterable[EventHandler] = (), max_workers: int = 2
    ) -> None:
        super().__init__(handlers)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="TaskEvents"
        )

    def publish(self, event: TaskCompleted) -> None:
        for handler in self._handlers:
            future = self._executor.submit(handler, event)
            future.add_done_callback(self._log_failure(handler, event))

    @staticmethod
    def _log_failure(handler: EventHandler, event: TaskCompleted):
        def callback(future: Future) -> None:
            if future.cancelled():
                return
            error = future.exception()
            if error is not None:
                logger.error(
                    f"❌ Handler {_handler_name(handler)} falló con "
                    f"{type(event).__name__} de la tarea {event.task.id}: {error}",
                    exc_info=error,
                )

        return callback

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
