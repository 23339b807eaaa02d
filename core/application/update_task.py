from dataclasses import dataclass

from core.application._refresh import fetch_fresh
from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class UpdateTaskCommand:
    title: str
    status: TaskStatus
    priority: TaskPriority
    description: str | None = None
    due_date: str | None = None


class UpdateTaskAction:
    """
    Reemplaza los cinco campos editables de una tarea en una sola escritura.

    No es un parche parcial: los campos omitidos en el comando quedan en None.
    Tampoco emite TaskCompleted aunque el estado pase a COMPLETED; eso es
    exclusivo de UpdateTaskStatusAction.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task: Task, cmd: UpdateTaskCommand) -> Task:
        self._repository.update(
            task.id,
            {
                "title": cmd.title,
                "description": cmd.description,
                "status": cmd.status,
                "priority": cmd.priority,
                "due_date": cmd.due_date,
            },
        )
        return fetch_fresh(self._repository, task.id)
