from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date
from typing import Any
from uuid import UUID

from core.domain.models.task import Task, TaskPriority, TaskStatus

# Campos que un llamador puede modificar; el dueño y los timestamps no.
UPDATABLE_FIELDS = frozenset({"title", "description", "status", "priority", "due_date"})


class TaskRepository(ABC):
    @abstractmethod
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
        raise NotImplementedError

    @abstractmethod
    def update(self, task_id: UUID, fields: Mapping[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: UUID) -> Task | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: UUID) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        raise NotImplementedError
