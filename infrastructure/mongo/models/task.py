from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from core.domain.models.task import Task, TaskPriority, TaskStatus, parse_due_date


class TaskMongo(BaseModel):
    """
    Modelo de Task para MongoDB.
    Representa cómo se almacena la tarea en la base de datos.

    BSON no admite fechas sin hora, por eso `due_date` se guarda como texto ISO.
    """

    id: str = Field(alias="_id")
    user_id: str
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    def to_domain(self) -> Task:
        """
        Convierte el modelo de MongoDB al modelo de dominio.

        Retorna:
            Task: La entidad de dominio.
        """
        return Task(
            id=UUID(self.id),
            user_id=UUID(self.user_id),
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status),
            priority=TaskPriority(self.priority),
            due_date=parse_due_date(self.due_date),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, task: Task) -> "TaskMongo":
        """
        Crea una instancia de TaskMongo a partir de una entidad de dominio.

        Argumentos:
            task (Task): La entidad de dominio.

        Retorna:
            TaskMongo: El modelo de MongoDB.
        """
        return cls(
            id=str(task.id),
            user_id=str(task.user_id),
            title=task.title,
            description=task.description,
            status=task.status.value,
            priority=task.priority.value,
            due_date=task.due_date.isoformat() if task.due_date else None,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
