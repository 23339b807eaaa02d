import logging

from core.domain.events.task_completed import TaskCompleted

logger = logging.getLogger(__name__)


class TaskCompletedLogger:
    """Listener de referencia: deja constancia de cada tarea completada."""

    def __call__(self, event: TaskCompleted) -> None:
        task = event.task
        completed_at = event.occurred_at.isoformat()
        logger.info(
            f"✅ Task completed notification: task_id={task.id} "
            f"title={task.title!r} user_id={task.user_id} completed_at={completed_at}",
            extra={
                "task_id": str(task.id),
                "task_title": task.title,
                "user_id": str(task.user_id),
                "completed_at": completed_at,
            },
        )
