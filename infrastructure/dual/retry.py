"""
Reintentos con backoff exponencial para el repositorio dual.

Solo se reintentan fallos de conectividad. Un PersistenceError cuenta
como reintentable cuando el backend lo marcó como `transient`.
"""

import logging
import time
from typing import Any, Callable

from peewee import OperationalError as PeeweeOperationalError
from pymongo.errors import ConnectionFailure
from sqlalchemy.exc import DisconnectionError, OperationalError

from core.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    OperationalError,
    DisconnectionError,
    PeeweeOperationalError,
    ConnectionFailure,
)


def is_retryable(
    error: BaseException,
    retryable_exceptions: tuple[type[BaseException], ...] = RETRYABLE_EXCEPTIONS,
) -> bool:
    if isinstance(error, PersistenceError):
        return error.transient
    return isinstance(error, retryable_exceptions)


def retry_with_backoff(
    func: Callable[[], Any],
    max_retries: int = 2,
    base_delay: float = 0.5,
    retryable_exceptions: tuple[type[BaseException], ...] = RETRYABLE_EXCEPTIONS,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """
    Ejecuta `func()` reintentando errores transitorios.

    Args:
        func:                 Callable sin argumentos.
        max_retries:          Reintentos además del intento original.
        base_delay:           Delay del primer reintento; se duplica en cada uno.
        retryable_exceptions: Excepciones de driver consideradas transitorias.
        sleep:                Función de espera (inyectable en tests).

    Returns:
        El resultado de `func()`.

    Raises:
        La excepción original si no es reintentable, o la última si se agotan los reintentos.
    """
    attempt = 0
    while True:
        try:
            return func()
        except Exception as e:
            if not is_retryable(e, retryable_exceptions):
                raise
            if attempt >= max_retries:
                logger.error(f"❌ Agotados {max_retries} reintentos. Último error: {e}")
                raise
            attempt += 1
            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                f"🔁 Retry {attempt}/{max_retries} tras error transitorio: {e}. "
                f"Esperando {delay:.1f}s..."
            )
            sleep(delay)
