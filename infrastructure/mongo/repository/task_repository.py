from datetime import date, datetime
from typing import Any
from uuid import UUID

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, PyMongoError

from core.domain.errors import PersistenceError
from core.domain.models.task import Task, TaskPriority, TaskStatus
from infrastructure.common.task_store import TaskStore
from infrastructure.mongo.models.task import TaskMongo
from infrastructure.mongo.session.client import get_db


def _persistence_error(operation: str, e: PyMongoError) -> PersistenceError:
    return PersistenceError(
        f"MongoDB {operation} failed: {e}",
        transient=isinstance(e, ConnectionFailure),
    )


def _to_document_value(value: Any) -> Any:
    if isinstance(value, (TaskStatus, TaskPriority)):
        return value.value
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()
    return value


class MongoTaskRepository(TaskStore):
    """
    Implementación de TaskRepository usando MongoDB (Synchronous).
    """

    def __init__(self) -> None:
        self.db = get_db()
        self.collection: Collection[Any] = self.db.tasks

    def insert(self, task: Task) -> None:
        """
        Inserta una tarea nueva. Usa upsert para que un reintento sea idempotente.

        Argumentos:
            task (Task): La tarea a guardar.
        """
        task_dict = TaskMongo.from_domain(task).model_dump(by_alias=True)
        try:
            self.collection.update_one(
                {"_id": task_dict["_id"]}, {"$set": task_dict}, upsert=True
            )
        except PyMongoError as e:
            raise _persistence_error("insert", e) from e

    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        """
        Aplica los cambios con `$set`, sin tocar el resto del documento.

        Argumentos:
            task_id (UUID): El ID de la tarea.
            changes (dict): Cambios ya normalizados.
        """
        document = {key: _to_document_value(value) for key, value in changes.items()}
        try:
            self.collection.update_one({"_id": str(task_id)}, {"$set": document})
        except PyMongoError as e:
            raise _persistence_error("update", e) from e

    def get(self, task_id: UUID) -> Task | None:
        """
        Obtiene una tarea por su ID.

        Argumentos:
            task_id (UUID): El ID de la tarea.

        Retorna:
            Task | None: La tarea encontrada o None si no existe.
        """
        try:
            doc = self.collection.find_one({"_id": str(task_id)})
        except PyMongoError as e:
            raise _persistence_error("get", e) from e
        if not doc:
            return None

        return TaskMongo(**doc).to_domain()

    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        """
        Lista las tareas de un usuario, las más recientes primero.

        Retorna:
            list[Task]: Tareas del usuario.
        """
        try:
            docs = self.collection.find({"user_id": str(owner_id)}).sort(
                "created_at", DESCENDING
            )
            return [TaskMongo(**doc).to_domain() for doc in docs]
        except PyMongoError as e:
            raise _persistence_error("list", e) from e

    def delete(self, task_id: UUID) -> bool:
        """
        Elimina una tarea por su ID.

        Argumentos:
            task_id (UUID): El ID de la tarea a eliminar.

        Retorna:
            bool: True si se eliminó un documento.
        """
        try:
            result = self.collection.delete_one({"_id": str(task_id)})
        except PyMongoError as e:
            raise _persistence_error("delete", e) from e
        return result.deleted_count > 0
