"""
Política de propiedad de tareas.

Una tarea pertenece a un único usuario y solo ese usuario puede verla,
editarla o eliminarla. No hay roles ni accesos compartidos.
"""

from enum import Enum

from core.domain.errors import AuthorizationError
from core.domain.models.task import Task
from core.domain.models.user import User


class Capability(str, Enum):
    VIEW = "view"
    UPDATE = "update"
    DELETE = "delete"


_OWNER_ONLY = frozenset({Capability.VIEW, Capability.UPDATE, Capability.DELETE})


def can(user: User | None, task: Task, capability: Capability) -> bool:
    """
    ¿Tiene `user` la capacidad indicada sobre `task`?

    Retorna:
        True solo si el usuario existe y es el dueño de la tarea.
    """
    if user is None:
        return False
    if capability in _OWNER_ONLY:
        return task.user_id == user.id
    return False


def authorize(user: User | None, task: Task, capability: Capability) -> None:
    """Lanza AuthorizationError si `can` deniega la capacidad."""
    if not can(user, task, capability):
        raise AuthorizationError(
            f"User is not allowed to {capability.value} task {task.id}"
        )
