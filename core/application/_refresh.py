from uuid import UUID

from core.domain.errors import TaskNotFoundError
from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository


def fetch_fresh(repository: TaskRepository, task_id: UUID) -> Task:
    """Relee la tarea tras una escritura para reflejar los cambios del repositorio."""
    task = repository.get(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task
