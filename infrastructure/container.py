from functools import lru_cache

from core.application.listeners.log_task_completed import TaskCompletedLogger
from core.domain.ports.event_channel import EventChannel, EventHandler
from core.domain.ports.task_repository import TaskRepository
from infrastructure.events.channel import SyncEventChannel, ThreadPoolEventChannel
from infrastructure.settings import get_settings


@lru_cache
def get_task_repository() -> TaskRepository:
    orm = get_settings().orm

    # Imports diferidos: solo se conecta el backend elegido.
    if orm == "mongo":
        from infrastructure.mongo.repository.task_repository import MongoTaskRepository

        return MongoTaskRepository()
    if orm == "sqlalchemy":
        from infrastructure.sqlalchemy.repository.task_repository import (
            SqlAlchemyTaskRepository,
        )

        return SqlAlchemyTaskRepository()

    from infrastructure.peewee.repository.task_repository import PeeweeTaskRepository

    if orm == "dual":
        from infrastructure.dual.repository.task_repository import DualTaskRepository
        from infrastructure.mongo.repository.task_repository import MongoTaskRepository

        return DualTaskRepository(
            sql_repository=PeeweeTaskRepository(),
            mongo_repository=MongoTaskRepository(),
        )
    return PeeweeTaskRepository()


def task_completed_handlers() -> list[EventHandler]:
    return [TaskCompletedLogger()]


@lru_cache
def get_event_channel() -> EventChannel:
    settings = get_settings()
    handlers = task_completed_handlers()
    if settings.event_dispatch == "thread":
        return ThreadPoolEventChannel(handlers, max_workers=settings.event_workers)
    return SyncEventChannel(handlers)
