from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository


class DeleteTaskAction:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task: Task) -> bool:
        return self._repository.delete(task.id)
