from dataclasses import dataclass

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.user import User
from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class CreateTaskCommand:
    title: str
    status: TaskStatus
    priority: TaskPriority
    description: str | None = None
    due_date: str | None = None


class CreateTaskAction:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, user: User, cmd: CreateTaskCommand) -> Task:
        return self._repository.create(
            owner_id=user.id,
            title=cmd.title,
            description=cmd.description,
            status=cmd.status,
            priority=cmd.priority,
            due_date=cmd.due_date,
        )
