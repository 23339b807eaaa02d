"""Etiquetas y colores de estados y prioridades. Solo para la UI."""

from dataclasses import dataclass

from core.domain.models.task import TaskPriority, TaskStatus


@dataclass(frozen=True, slots=True)
class Display:
    label: str
    color: str


STATUS_DISPLAY: dict[TaskStatus, Display] = {
    TaskStatus.PENDING: Display("Pending", "gray"),
    TaskStatus.IN_PROGRESS: Display("In Progress", "blue"),
    TaskStatus.COMPLETED: Display("Completed", "green"),
}

PRIORITY_DISPLAY: dict[TaskPriority, Display] = {
    TaskPriority.LOW: Display("Low", "gray"),
    TaskPriority.MEDIUM: Display("Medium", "yellow"),
    TaskPriority.HIGH: Display("High", "red"),
}
