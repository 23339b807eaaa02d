from typing import Any
from uuid import UUID

from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError

from core.domain.errors import PersistenceError
from core.domain.models.task import Task, TaskPriority, TaskStatus
from infrastructure.common.task_store import TaskStore
from infrastructure.sqlalchemy.model.models import TaskModel
from infrastructure.sqlalchemy.session.db import get_session, init_db


def _to_domain(task_model: TaskModel) -> Task:
    return Task(
        id=UUID(task_model.id),
        user_id=UUID(task_model.user_id),
        title=task_model.title,
        description=task_model.description,
        status=TaskStatus(task_model.status),
        priority=TaskPriority(task_model.priority),
        due_date=task_model.due_date,
        created_at=task_model.created_at,
        updated_at=task_model.updated_at,
    )


def _persistence_error(operation: str, e: SQLAlchemyError) -> PersistenceError:
    return PersistenceError(
        f"SQLAlchemy {operation} failed: {e}",
        transient=isinstance(e, (OperationalError, DisconnectionError)),
    )


class SqlAlchemyTaskRepository(TaskStore):
    def __init__(self) -> None:
        init_db()

    def insert(self, task: Task) -> None:
        session = get_session()
        try:
            session.add(
                TaskModel(
                    id=str(task.id),
                    user_id=str(task.user_id),
                    title=task.title,
                    description=task.description,
                    status=task.status.value,
                    priority=task.priority.value,
                    due_date=task.due_date,
                    created_at=task.created_at,
                    updated_at=task.updated_at,
                )
            )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise _persistence_error("insert", e) from e
        finally:
            session.close()

    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return
            for key, value in changes.items():
                if isinstance(value, (TaskStatus, TaskPriority)):
                    value = value.value
                setattr(task_model, key, value)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise _persistence_error("update", e) from e
        finally:
            session.close()

    def get(self, task_id: UUID) -> Task | None:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return None
            return _to_domain(task_model)
        except SQLAlchemyError as e:
            raise _persistence_error("get", e) from e
        finally:
            session.close()

    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        session = get_session()
        try:
            task_models = (
                session.query(TaskModel)
                .filter(TaskModel.user_id == str(owner_id))
                .order_by(TaskModel.created_at.desc())
                .all()
            )
            return [_to_domain(task_model) for task_model in task_models]
        except SQLAlchemyError as e:
            raise _persistence_error("list", e) from e
        finally:
            session.close()

    def delete(self, task_id: UUID) -> bool:
        session = get_session()
        try:
            task_model = session.get(TaskModel, str(task_id))
            if task_model is None:
                return False
            session.delete(task_model)
            session.commit()
            return True
        except SQLAlchemyError as e:
            session.rollback()
            raise _persistence_error("delete", e) from e
        finally:
            session.close()
