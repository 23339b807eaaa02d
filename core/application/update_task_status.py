import logging

from core.application._refresh import fetch_fresh
from core.domain.events.task_completed import TaskCompleted
from core.domain.models.task import Task, TaskStatus
from core.domain.ports.event_channel import EventChannel
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class UpdateTaskStatusAction:
    """
    Cambia solo el estado de una tarea.

    Es la única vía que emite TaskCompleted, y solo en la transición
    (anterior != COMPLETED) -> COMPLETED. Marcar como completada una tarea
    que ya lo estaba no vuelve a notificar.
    """

    def __init__(self, repository: TaskRepository, events: EventChannel) -> None:
        self._repository = repository
        self._events = events

    def execute(self, task: Task, status: TaskStatus) -> Task:
        previous_status = task.status

        self._repository.update(task.id, {"status": status})
        refreshed = fetch_fresh(self._repository, task.id)

        if status == TaskStatus.COMPLETED and previous_status != TaskStatus.COMPLETED:
            logger.debug(f"Tarea {task.id}: {previous_status.value} → completed")
            self._events.publish(TaskCompleted(task=refreshed))

        return refreshed
