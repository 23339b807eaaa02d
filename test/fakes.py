from dataclasses import replace
from typing import Any
from uuid import UUID

from core.domain.errors import PersistenceError
from core.domain.events.task_completed import TaskCompleted
from core.domain.models.task import Task
from core.domain.ports.event_channel import EventChannel, EventHandler
from infrastructure.common.task_store import TaskStore


class InMemoryTaskRepository(TaskStore):
    def __init__(self) -> None:
        self._data: dict[UUID, Task] = {}
        self.fail_writes = False

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise PersistenceError("write rejected", transient=True)

    def insert(self, task: Task) -> None:
        self._check_writable()
        self._data[task.id] = task

    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        self._check_writable()
        if task_id in self._data:
            self._data[task_id] = replace(self._data[task_id], **changes)

    def get(self, task_id: UUID) -> Task | None:
        return self._data.get(task_id)

    def delete(self, task_id: UUID) -> bool:
        self._check_writable()
        return self._data.pop(task_id, None) is not None

    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        tasks = [task for task in self._data.values() if task.user_id == owner_id]
        return sorted(tasks, key=lambda task: task.created_at, reverse=True)


class RecordingEventChannel(EventChannel):
    def __init__(self) -> None:
        self.events: list[TaskCompleted] = []

    def subscribe(self, handler: EventHandler) -> None:
        raise NotImplementedError("RecordingEventChannel solo registra eventos")

    def publish(self, event: TaskCompleted) -> None:
        self.events.append(event)
