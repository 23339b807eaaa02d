from core.domain.models.task import Task
from core.domain.models.user import User
from core.domain.ports.task_repository import TaskRepository


class ListTasksAction:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, user: User) -> list[Task]:
        return self._repository.list_for_owner(user.id)
