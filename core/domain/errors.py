"""
Errores del dominio de tareas.

Las acciones no capturan ninguno: se propagan hasta la frontera HTTP,
que los traduce a códigos de estado.
"""


class TaskError(Exception):
    """Base de todos los errores del dominio."""


class PersistenceError(TaskError):
    """
    El repositorio no pudo completar una lectura o escritura.

    Args:
        message:   Descripción del fallo.
        transient: True si el fallo es de conectividad y vale la pena reintentar.
    """

    def __init__(self, message: str, *, transient: bool = False) -> None:
        super().__init__(message)
        self.transient = transient


class TaskNotFoundError(TaskError):
    def __init__(self, task_id) -> None:
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id


class AuthorizationError(TaskError):
    """La política de propiedad denegó la capacidad solicitada."""


class ValidationError(TaskError):
    """Entrada rechazada en la frontera antes de invocar una acción."""
