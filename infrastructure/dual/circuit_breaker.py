"""
Circuit Breaker por backend de persistencia.

Evita insistir contra una BDD que ya sabemos caída: tras N fallos seguidos
el repositorio dual deja de enviarle operaciones durante un tiempo.

Estados:
    CLOSED    → Funciona normal. Cuenta fallos consecutivos.
    OPEN      → BDD considerada caída. Las operaciones van al otro backend.
    HALF_OPEN → Pasado el timeout, se deja pasar una operación de prueba.
"""

import logging
import threading
import time
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """
    Circuit Breaker thread-safe.

    Args:
        name:              Nombre del backend para los logs, ej: "Peewee", "MongoDB".
        failure_threshold: Fallos consecutivos que abren el circuito.
        recovery_timeout:  Segundos en OPEN antes de pasar a HALF_OPEN.
        clock:             Fuente de tiempo monotónico (inyectable en tests).
    """

    CLOSED = CircuitState.CLOSED
    OPEN = CircuitState.OPEN
    HALF_OPEN = CircuitState.HALF_OPEN

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        recovery_timeout: float = 30.0,
        clock=time.monotonic,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at: float | None = None
        self._lock = threading.Lock()

    def _transition(self, new_state: CircuitState, reason: str) -> None:
        old_state, self._state = self._state, new_state
        log = logger.warning if new_state is CircuitState.OPEN else logger.info
        log(f"Circuit Breaker [{self.name}]: {old_state.value} → {new_state.value} ({reason})")

    @property
    def state(self) -> CircuitState:
        with self._lock:
            if self._state is CircuitState.OPEN and self._opened_at is not None:
                elapsed = self._clock() - self._opened_at
                if elapsed >= self.recovery_timeout:
                    self._transition(CircuitState.HALF_OPEN, f"tras {elapsed:.1f}s")
            return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    def allow_request(self) -> bool:
        return self.state is not CircuitState.OPEN

    def record_success(self) -> None:
        with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._transition(CircuitState.CLOSED, "operación de prueba exitosa")
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._opened_at = None

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            self._opened_at = self._clock()

            if self._state is CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN, "la prueba falló")
            elif (
                self._state is CircuitState.CLOSED
                and self._failures >= self.failure_threshold
            ):
                self._transition(
                    CircuitState.OPEN, f"fallos consecutivos: {self._failures}"
                )

    def reset(self) -> None:
        with self._lock:
            self._state = CircuitState.CLOSED
            self._failures = 0
            self._opened_at = None
