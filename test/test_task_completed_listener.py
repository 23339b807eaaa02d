import logging
from datetime import datetime, timezone
from uuid import uuid4

from core.application.listeners.log_task_completed import TaskCompletedLogger
from core.domain.events.task_completed import TaskCompleted
from core.domain.models.task import Task, TaskPriority, TaskStatus


def test_logs_task_id_title_owner_and_completion_time(caplog):
    now = datetime(2026, 5, 4, 10, 0, 0)
    task = Task(
        id=uuid4(),
        user_id=uuid4(),
        title="Write report",
        status=TaskStatus.COMPLETED,
        priority=TaskPriority.MEDIUM,
        created_at=now,
        updated_at=now,
    )
    completed_at = datetime(2026, 5, 4, 10, 0, 5, tzinfo=timezone.utc)

    with caplog.at_level(logging.INFO, logger="core.application.listeners.log_task_completed"):
        TaskCompletedLogger()(TaskCompleted(task=task, occurred_at=completed_at))

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.INFO
    assert record.task_id == str(task.id)
    assert record.task_title == "Write report"
    assert record.user_id == str(task.user_id)
    assert record.completed_at == completed_at.isoformat()
    assert "Task completed notification" in record.getMessage()
