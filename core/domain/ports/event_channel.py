from abc import ABC, abstractmethod
from typing import Callable

from core.domain.events.task_completed import TaskCompleted

EventHandler = Callable[[TaskCompleted], None]


class EventChannel(ABC):
    @abstractmethod
    def subscribe(self, handler: EventHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def publish(self, event: TaskCompleted) -> None:
        """Entrega el evento a los handlers. Nunca propaga sus errores."""
        raise NotImplementedError
