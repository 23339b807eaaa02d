from typing import Callable
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from core.application.create_task import CreateTaskAction
from core.application.delete_task import DeleteTaskAction
from core.application.list_tasks import ListTasksAction
from core.application.update_task import UpdateTaskAction
from core.application.update_task_status import UpdateTaskStatusAction
from core.domain.errors import TaskNotFoundError
from core.domain.models.task import Task
from core.domain.models.user import User
from core.domain.policies.task_policy import Capability, authorize
from core.domain.ports.event_channel import EventChannel
from core.domain.ports.task_repository import TaskRepository
from infrastructure.container import get_event_channel, get_task_repository


def task_repository() -> TaskRepository:
    return get_task_repository()


def event_channel() -> EventChannel:
    return get_event_channel()


def current_user(x_user_id: str | None = Header(default=None)) -> User:
    """
    Usuario ya autenticado por el proxy, identificado por la cabecera X-User-Id.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header"
        )
    try:
        return User(id=UUID(x_user_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid X-User-Id header"
        )


def authorized_task(capability: Capability) -> Callable[..., Task]:
    """Resuelve la tarea de la ruta y exige la capacidad antes de llegar a la acción."""

    def dependency(
        task_id: UUID,
        user: User = Depends(current_user),
        repository: TaskRepository = Depends(task_repository),
    ) -> Task:
        task = repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        authorize(user, task, capability)
        return task

    return dependency


def create_task_action(
    repository: TaskRepository = Depends(task_repository),
) -> CreateTaskAction:
    return CreateTaskAction(repository=repository)


def update_task_action(
    repository: TaskRepository = Depends(task_repository),
) -> UpdateTaskAction:
    return UpdateTaskAction(repository=repository)


def update_task_status_action(
    repository: TaskRepository = Depends(task_repository),
    events: EventChannel = Depends(event_channel),
) -> UpdateTaskStatusAction:
    return UpdateTaskStatusAction(repository=repository, events=events)


def delete_task_action(
    repository: TaskRepository = Depends(task_repository),
) -> DeleteTaskAction:
    return DeleteTaskAction(repository=repository)


def list_tasks_action(
    repository: TaskRepository = Depends(task_repository),
) -> ListTasksAction:
    return ListTasksAction(repository=repository)
