from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.domain.models.task import Task


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class TaskCompleted:
    """Se emite cuando una tarea pasa a COMPLETED desde otro estado."""

    task: Task
    occurred_at: datetime = field(default_factory=_now)
