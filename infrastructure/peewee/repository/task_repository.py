from typing import Any
from uuid import UUID

from peewee import InterfaceError, OperationalError, PeeweeException

from core.domain.errors import PersistenceError
from core.domain.models.task import Task, TaskPriority, TaskStatus
from infrastructure.common.task_store import TaskStore
from infrastructure.peewee.model.models import TaskModel
from infrastructure.peewee.session.db import db


def _to_domain(row: TaskModel) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        status=TaskStatus(row.status),
        priority=TaskPriority(row.priority),
        due_date=row.due_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _persistence_error(operation: str, e: PeeweeException) -> PersistenceError:
    return PersistenceError(
        f"Peewee {operation} failed: {e}",
        transient=isinstance(e, (OperationalError, InterfaceError)),
    )


class PeeweeTaskRepository(TaskStore):
    def __init__(self) -> None:
        # Sin migraciones: la tabla se crea al instanciar el repositorio.
        db.connect(reuse_if_open=True)
        db.create_tables([TaskModel], safe=True)

    def insert(self, task: Task) -> None:
        try:
            with db.atomic():
                TaskModel.create(
                    id=task.id,
                    user_id=task.user_id,
                    title=task.title,
                    description=task.description,
                    status=task.status.value,
                    priority=task.priority.value,
                    due_date=task.due_date,
                    created_at=task.created_at,
                    updated_at=task.updated_at,
                )
        except PeeweeException as e:
            raise _persistence_error("insert", e) from e

    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        row = {
            key: value.value if isinstance(value, (TaskStatus, TaskPriority)) else value
            for key, value in changes.items()
        }
        try:
            with db.atomic():
                TaskModel.update(row).where(TaskModel.id == task_id).execute()
        except PeeweeException as e:
            raise _persistence_error("update", e) from e

    def get(self, task_id: UUID) -> Task | None:
        try:
            return _to_domain(TaskModel.get(TaskModel.id == task_id))
        except TaskModel.DoesNotExist:
            return None
        except PeeweeException as e:
            raise _persistence_error("get", e) from e

    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        query = (
            TaskModel.select()
            .where(TaskModel.user_id == owner_id)
            .order_by(TaskModel.created_at.desc())
        )
        try:
            return [_to_domain(row) for row in query]
        except PeeweeException as e:
            raise _persistence_error("list", e) from e

    def delete(self, task_id: UUID) -> bool:
        try:
            deleted = TaskModel.delete().where(TaskModel.id == task_id).execute()
        except PeeweeException as e:
            raise _persistence_error("delete", e) from e
        return deleted > 0
