import logging
import threading
from datetime import datetime
from uuid import uuid4

import pytest

from core.domain.events.task_completed import TaskCompleted
from core.domain.models.task import Task, TaskPriority, TaskStatus
from infrastructure.events.channel import SyncEventChannel, ThreadPoolEventChannel


@pytest.fixture
def event():
    now = datetime(2026, 3, 1, 9, 30, 0)
    task = Task(
        id=uuid4(),
        user_id=uuid4(),
        title="Ship release",
        status=TaskStatus.COMPLETED,
        priority=TaskPriority.HIGH,
        created_at=now,
        updated_at=now,
    )
    return TaskCompleted(task=task)


def _broken(event):
    raise RuntimeError("boom")


class TestSyncEventChannel:
    def test_handlers_registered_at_construction_receive_event(self, event):
        received = []
        channel = SyncEventChannel([received.append])

        channel.publish(event)

        assert received == [event]

    def test_dispatches_in_registration_order(self, event):
        calls = []
        channel = SyncEventChannel()
        channel.subscribe(lambda e: calls.append("first"))
        channel.subscribe(lambda e: calls.append("second"))

        channel.publish(event)

        assert calls == ["first", "second"]

    def test_no_handlers_is_a_noop(self, event):
        SyncEventChannel().publish(event)

    def test_failing_handler_is_logged_and_isolated(self, event, caplog):
        received = []
        channel = SyncEventChannel([_broken, received.append])

        with caplog.at_level(logging.ERROR, logger="infrastructure.events.channel"):
            channel.publish(event)

        assert received == [event]
        assert "_broken" in caplog.text
        assert str(event.task.id) in caplog.text


class TestThreadPoolEventChannel:
    def test_handlers_run_off_the_calling_thread(self, event):
        threads = []
        channel = ThreadPoolEventChannel(
            [lambda e: threads.append(threading.current_thread().name)]
        )

        channel.publish(event)
        channel.shutdown(wait=True)

        assert len(threads) == 1
        assert threads[0] != threading.current_thread().name
        assert threads[0].startswith("TaskEvents")

    def test_failing_handler_does_not_raise_to_publisher(self, event, caplog):
        received = []
        channel = ThreadPoolEventChannel([_broken, received.append])

        with caplog.at_level(logging.ERROR, logger="infrastructure.events.channel"):
            channel.publish(event)
            channel.shutdown(wait=True)

        assert received == [event]
        assert "boom" in caplog.text
