"""
Base común para los repositorios que persisten la entidad completa.

`create` y `update` se resuelven aquí; cada backend solo implementa
`insert` y `apply_changes`. Así el repositorio dual puede escribir
exactamente la misma tarea (mismo id, mismos timestamps) en ambas BDD.
"""

from abc import abstractmethod
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from core.domain.errors import PersistenceError
from core.domain.models.task import Task, TaskPriority, TaskStatus, parse_due_date
from core.domain.ports.task_repository import UPDATABLE_FIELDS, TaskRepository


def utcnow() -> datetime:
    """UTC sin tzinfo, truncado a milisegundos (precisión de BSON)."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _due_date(value: str | date | None) -> date | None:
    try:
        return parse_due_date(value)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Invalid due date {value!r}: {e}") from e


def build_task(
    *,
    owner_id: UUID,
    title: str,
    description: str | None,
    status: TaskStatus,
    priority: TaskPriority,
    due_date: str | date | None,
) -> Task:
    now = utcnow()
    return Task(
        id=uuid4(),
        user_id=owner_id,
        title=title,
        description=description,
        status=TaskStatus(status),
        priority=TaskPriority(priority),
        due_date=_due_date(due_date),
        created_at=now,
        updated_at=now,
    )


def prepare_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normaliza los campos de un update y añade `updated_at`.

    Raises:
        ValueError: si se intenta modificar un campo no editable.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Non-updatable task fields: {sorted(unknown)}")

    changes: dict[str, Any] = dict(fields)
    if "status" in changes:
        changes["status"] = TaskStatus(changes["status"])
    if "priority" in changes:
        changes["priority"] = TaskPriority(changes["priority"])
    if "due_date" in changes:
        changes["due_date"] = _due_date(changes["due_date"])
    changes["updated_at"] = utcnow()
    return changes


class TaskStore(TaskRepository):
    def create(
        self,
        *,
        owner_id: UUID,
        title: str,
        description: str | None,
        status: TaskStatus,
        priority: TaskPriority,
        due_date: str | date | None,
    ) -> Task:
        task = build_task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
        )
        self.insert(task)
        return task

    def update(self, task_id: UUID, fields: Mapping[str, Any]) -> None:
        self.apply_changes(task_id, prepare_changes(fields))

    @abstractmethod
    def insert(self, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        """Aplica cambios ya normalizados por `prepare_changes`."""
        raise NotImplementedError
