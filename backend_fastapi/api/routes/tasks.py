from fastapi import APIRouter, Depends, status

from backend_fastapi.api.deps import (
    authorized_task,
    create_task_action,
    current_user,
    delete_task_action,
    list_tasks_action,
    update_task_action,
    update_task_status_action,
)
from backend_fastapi.api.presentation import PRIORITY_DISPLAY, STATUS_DISPLAY
from backend_fastapi.api.schemas import (
    DisplayOption,
    TaskOptionsResponse,
    TaskPayload,
    TaskResponse,
    TaskStatusPayload,
)
from core.application.create_task import CreateTaskAction
from core.application.delete_task import DeleteTaskAction
from core.application.list_tasks import ListTasksAction
from core.application.update_task import UpdateTaskAction
from core.application.update_task_status import UpdateTaskStatusAction
from core.domain.models.task import Task
from core.domain.models.user import User
from core.domain.policies.task_policy import Capability

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Listar las tareas del usuario",
)
def list_tasks(
    user: User = Depends(current_user),
    action: ListTasksAction = Depends(list_tasks_action),
) -> list[TaskResponse]:
    """
    Tareas del usuario actual, las más recientes primero.
    """
    return [TaskResponse.from_domain(task) for task in action.execute(user)]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear una nueva tarea",
)
def create_task(
    payload: TaskPayload,
    user: User = Depends(current_user),
    action: CreateTaskAction = Depends(create_task_action),
) -> TaskResponse:
    """
    Crea una tarea cuyo dueño es el usuario actual.

    - **title**: Título (1 a 255 caracteres).
    - **description**: Descripción opcional.
    - **status** / **priority**: Valores de sus enums.
    - **due_date**: Fecha límite opcional (YYYY-MM-DD), hoy o posterior.
    """
    return TaskResponse.from_domain(action.execute(user, payload.to_create_command()))


@router.get(
    "/options",
    response_model=TaskOptionsResponse,
    summary="Estados y prioridades disponibles",
)
def task_options() -> TaskOptionsResponse:
    return TaskOptionsResponse(
        statuses=[
            DisplayOption(value=value.value, label=display.label, color=display.color)
            for value, display in STATUS_DISPLAY.items()
        ],
        priorities=[
            DisplayOption(value=value.value, label=display.label, color=display.color)
            for value, display in PRIORITY_DISPLAY.items()
        ],
    )


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Ver una tarea",
)
def show_task(
    task: Task = Depends(authorized_task(Capability.VIEW)),
) -> TaskResponse:
    return TaskResponse.from_domain(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Editar una tarea existente",
)
def update_task(
    payload: TaskPayload,
    task: Task = Depends(authorized_task(Capability.UPDATE)),
    action: UpdateTaskAction = Depends(update_task_action),
) -> TaskResponse:
    """
    Reemplaza título, descripción, estado, prioridad y fecha límite.

    Los campos omitidos quedan vacíos. No notifica la finalización;
    para eso usar `PATCH /tasks/{task_id}/status`.
    """
    return TaskResponse.from_domain(action.execute(task, payload.to_update_command()))


@router.patch(
    "/{task_id}/status",
    response_model=TaskResponse,
    summary="Cambiar el estado de una tarea",
)
def update_task_status(
    payload: TaskStatusPayload,
    task: Task = Depends(authorized_task(Capability.UPDATE)),
    action: UpdateTaskStatusAction = Depends(update_task_status_action),
) -> TaskResponse:
    return TaskResponse.from_domain(action.execute(task, payload.status))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar una tarea",
)
def delete_task(
    task: Task = Depends(authorized_task(Capability.DELETE)),
    action: DeleteTaskAction = Depends(delete_task_action),
) -> None:
    action.execute(task)
