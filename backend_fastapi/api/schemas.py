from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend_fastapi.api.presentation import PRIORITY_DISPLAY, STATUS_DISPLAY
from core.application.create_task import CreateTaskCommand
from core.application.update_task import UpdateTaskCommand
from core.domain.models.task import Task, TaskPriority, TaskStatus


class TaskPayload(BaseModel):
    """Cuerpo de creación y de edición completa de una tarea."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None

    @field_validator("due_date")
    @classmethod
    def due_date_not_in_past(cls, value: date | None) -> date | None:
        if value is not None and value < date.today():
            raise ValueError("due_date must be today or later")
        return value

    def _due_date_str(self) -> str | None:
        return self.due_date.isoformat() if self.due_date else None

    def to_create_command(self) -> CreateTaskCommand:
        return CreateTaskCommand(
            title=self.title,
            description=self.description,
            status=self.status,
            priority=self.priority,
            due_date=self._due_date_str(),
        )

    def to_update_command(self) -> UpdateTaskCommand:
        return UpdateTaskCommand(
            title=self.title,
            description=self.description,
            status=self.status,
            priority=self.priority,
            due_date=self._due_date_str(),
        )


class TaskStatusPayload(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: str | None
    status: TaskStatus
    status_label: str
    status_color: str
    priority: TaskPriority
    priority_label: str
    priority_color: str
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        status = STATUS_DISPLAY[task.status]
        priority = PRIORITY_DISPLAY[task.priority]
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            status=task.status,
            status_label=status.label,
            status_color=status.color,
            priority=task.priority,
            priority_label=priority.label,
            priority_color=priority.color,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class DisplayOption(BaseModel):
    value: str
    label: str
    color: str


class TaskOptionsResponse(BaseModel):
    statuses: list[DisplayOption]
    priorities: list[DisplayOption]
