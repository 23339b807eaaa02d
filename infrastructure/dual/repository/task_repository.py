import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, Callable
from uuid import UUID

import psycopg2
from pymongo import MongoClient

from core.domain.errors import PersistenceError
from core.domain.models.task import Task
from infrastructure.common.task_store import TaskStore
from infrastructure.dual.circuit_breaker import CircuitBreaker
from infrastructure.dual.retry import retry_with_backoff
from infrastructure.settings import get_settings

logger = logging.getLogger(__name__)

# ── Pool de threads compartido: 2 para pings + 2 para escrituras en paralelo ──
executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="DualRepo")

_PING_TIMEOUT_SECS = 3
_PING_TIMEOUT_MS = _PING_TIMEOUT_SECS * 1000

# ── Configuración de resiliencia ──────────────────────────────────────────────
_CIRCUIT_FAILURE_THRESHOLD = 3
_CIRCUIT_RECOVERY_TIMEOUT = 30.0
_RETRY_MAX_RETRIES = 2
_RETRY_BASE_DELAY = 0.5
_PARALLEL_TIMEOUT = 10.0


def _ping_sql() -> bool:
    """
    Hace ping a la base de datos SQL. SQLite se asume siempre disponible.

    Returns:
        True si la BDD está disponible, False en caso contrario.
    """
    dsn = get_settings().database_url
    if not dsn or dsn.startswith("sqlite") or "postgres" not in dsn:
        return True

    try:
        conn = psycopg2.connect(dsn=dsn, connect_timeout=_PING_TIMEOUT_SECS)
        conn.close()
        return True
    except psycopg2.Error as e:
        logger.error(f"🔴 SQL no disponible: {e}")
        return False


def _ping_mongo() -> bool:
    """
    Hace ping a MongoDB con timeout controlado.

    Returns:
        True si la BDD está disponible, False en caso contrario.
    """
    client: MongoClient | None = None
    try:
        client = MongoClient(
            get_settings().mongo_uri, serverSelectionTimeoutMS=_PING_TIMEOUT_MS
        )
        client.admin.command("ping")
        return True
    except Exception as e:
        logger.error(f"🔴 Mongo no disponible: {e}")
        return False
    finally:
        if client is not None:
            client.close()


def _ping_both() -> tuple[bool, bool]:
    """
    Hace ping a SQL y MongoDB en paralelo.

    Returns:
        Tupla (sql_ok, mongo_ok)
    """
    future_sql = executor.submit(_ping_sql)
    future_mongo = executor.submit(_ping_mongo)
    sql_ok = future_sql.result(timeout=_PING_TIMEOUT_SECS + 1)
    mongo_ok = future_mongo.result(timeout=_PING_TIMEOUT_SECS + 1)
    return sql_ok, mongo_ok


class DualTaskRepository(TaskStore):
    """
    Repositorio que escribe en SQL (Peewee) y MongoDB, y lee de SQL con fallback a MongoDB.

    - ESCRITURA (insert/apply_changes/delete): ping previo en paralelo.
      Si ambas responden → escribe en paralelo.
      Si solo una responde (o su circuito está OPEN) → escribe solo en esa.
      Si ninguna responde → PersistenceError sin intentar escribir.
    - LECTURA (get/list_for_owner): SQL primero, MongoDB como fallback.

    Como hereda de TaskStore, `create` y `update` construyen la tarea y los
    cambios una sola vez: ambas BDD reciben el mismo id y los mismos timestamps.
    """

    def __init__(self, sql_repository: TaskStore, mongo_repository: TaskStore) -> None:
        self._sql_repo = sql_repository
        self._mongo_repo = mongo_repository

        self._sql_circuit = CircuitBreaker(
            name="Peewee",
            failure_threshold=_CIRCUIT_FAILURE_THRESHOLD,
            recovery_timeout=_CIRCUIT_RECOVERY_TIMEOUT,
        )
        self._mongo_circuit = CircuitBreaker(
            name="MongoDB",
            failure_threshold=_CIRCUIT_FAILURE_THRESHOLD,
            recovery_timeout=_CIRCUIT_RECOVERY_TIMEOUT,
        )

        logger.info("DualTaskRepository inicializado con Peewee y MongoDB")

    # ──────────────────────────────────────────────────────────────────────────
    # Infraestructura de escritura
    # ──────────────────────────────────────────────────────────────────────────

    def _execute_parallel(
        self, sql_func: Callable[[], Any], mongo_func: Callable[[], Any]
    ) -> tuple[Any, Exception | None, Any, Exception | None]:
        """
        Ejecuta ambas operaciones en paralelo con timeout explícito.

        Returns:
            Tupla (sql_result, sql_error, mongo_result, mongo_error)
        """
        results: dict[str, Any] = {"sql": None, "mongo": None}
        errors: dict[str, Exception | None] = {"sql": None, "mongo": None}
        futures = {
            executor.submit(sql_func): ("sql", "Peewee", self._sql_circuit),
            executor.submit(mongo_func): ("mongo", "MongoDB", self._mongo_circuit),
        }

        try:
            for future in as_completed(futures, timeout=_PARALLEL_TIMEOUT):
                key, name, circuit = futures[future]
                try:
                    results[key] = future.result()
                    circuit.record_success()
                    logger.debug(f"✓ Operación {name} completada")
                except Exception as e:
                    errors[key] = e
                    circuit.record_failure()
                    logger.error(f"✗ {name} falló: {e}")
        except FuturesTimeoutError:
            for future, (key, name, circuit) in futures.items():
                if not future.done():
                    errors[key] = TimeoutError(f"{name} excedió timeout paralelo")
                    circuit.record_failure()
                    logger.error(f"⏰ {name} timeout ({_PARALLEL_TIMEOUT}s)")
                    future.cancel()

        return results["sql"], errors["sql"], results["mongo"], errors["mongo"]

    def _execute_single(
        self, name: str, circuit: CircuitBreaker, func: Callable[[], Any]
    ) -> Any:
        try:
            result = retry_with_backoff(
                func, max_retries=_RETRY_MAX_RETRIES, base_delay=_RETRY_BASE_DELAY
            )
        except Exception as e:
            circuit.record_failure()
            logger.error(f"✗ {name} falló: {e}")
            raise
        circuit.record_success()
        logger.debug(f"✓ Operación {name} completada")
        return result

    def _dispatch_write(
        self,
        operation: str,
        sql_func: Callable[[], Any],
        mongo_func: Callable[[], Any],
        entity_id: UUID,
    ) -> list[Any]:
        """
        Orquesta una escritura según circuitos y ping previo.

        Returns:
            Los resultados de los backends donde la escritura tuvo éxito.

        Raises:
            PersistenceError: si ningún backend aceptó la escritura.
        """
        sql_allowed = self._sql_circuit.allow_request()
        mongo_allowed = self._mongo_circuit.allow_request()

        if not sql_allowed and not mongo_allowed:
            msg = (
                f"{operation} abortado: ambos Circuit Breakers abiertos "
                f"(SQL={self._sql_circuit.state.value}, "
                f"Mongo={self._mongo_circuit.state.value})"
            )
            logger.error(f"❌ {msg}")
            raise PersistenceError(msg)

        if sql_allowed and not mongo_allowed:
            logger.warning(
                f"⚡ MongoDB circuit OPEN. {operation} de {entity_id} solo en Peewee."
            )
            return [self._execute_single("Peewee", self._sql_circuit, sql_func)]

        if mongo_allowed and not sql_allowed:
            logger.warning(
                f"⚡ Peewee circuit OPEN. {operation} de {entity_id} solo en MongoDB."
            )
            return [self._execute_single("MongoDB", self._mongo_circuit, mongo_func)]

        logger.info(f"🏓 Ping previo a BDD para {operation} de {entity_id}...")
        sql_ok, mongo_ok = _ping_both()

        if not sql_ok and not mongo_ok:
            self._sql_circuit.record_failure()
            self._mongo_circuit.record_failure()
            msg = f"{operation} abortado: ninguna BDD disponible"
            logger.error(f"❌ {msg}")
            raise PersistenceError(msg, transient=True)

        if sql_ok and not mongo_ok:
            self._mongo_circuit.record_failure()
            logger.warning(
                f"⚠️ MongoDB no disponible. {operation} de {entity_id} solo en SQL."
            )
            return [self._execute_single("Peewee", self._sql_circuit, sql_func)]

        if mongo_ok and not sql_ok:
            self._sql_circuit.record_failure()
            logger.warning(
                f"⚠️ SQL no disponible. {operation} de {entity_id} solo en MongoDB."
            )
            return [self._execute_single("MongoDB", self._mongo_circuit, mongo_func)]

        logger.info(f"🔄 {operation} dual iniciado para {entity_id}")
        sql_result, sql_error, mongo_result, mongo_error = self._execute_parallel(
            sql_func, mongo_func
        )

        if sql_error and mongo_error:
            msg = (
                f"{operation} falló en ambas bases de datos. "
                f"Peewee: {sql_error}. MongoDB: {mongo_error}"
            )
            logger.error(f"❌ {msg}")
            raise PersistenceError(msg) from sql_error

        if sql_error:
            logger.warning(f"⚠️ Peewee falló pero MongoDB tuvo éxito en {operation} {entity_id}")
            return [mongo_result]
        if mongo_error:
            logger.warning(f"⚠️ MongoDB falló pero Peewee tuvo éxito en {operation} {entity_id}")
            return [sql_result]

        logger.info(f"✅ {operation} dual exitoso para {entity_id}")
        return [sql_result, mongo_result]

    def _read(self, operation: str, sql_func: Callable[[], Any], mongo_func: Callable[[], Any]) -> Any:
        """
        Lee de Peewee y, si falla o no encuentra nada, de MongoDB.

        Raises:
            PersistenceError: si ambos backends fallaron o están con el circuito abierto.
        """
        sql_error: Exception | None = None

        if self._sql_circuit.allow_request():
            try:
                result = self._execute_single("Peewee", self._sql_circuit, sql_func)
                if result:
                    return result
            except Exception as e:
                sql_error = e
                logger.warning(f"⚠️ Error en {operation} de Peewee: {e}")
        else:
            logger.info(f"⚡ Peewee circuit OPEN — {operation} directo a MongoDB")

        if not self._mongo_circuit.allow_request():
            if sql_error is not None:
                raise PersistenceError(
                    f"{operation} falló: Peewee con error y MongoDB con circuito abierto"
                ) from sql_error
            if not self._sql_circuit.allow_request():
                raise PersistenceError(
                    f"{operation} falló: ambos Circuit Breakers en estado OPEN"
                )
            return None

        try:
            result = self._execute_single("MongoDB", self._mongo_circuit, mongo_func)
        except Exception as e:
            raise PersistenceError(
                f"{operation} falló en ambas bases de datos. MongoDB: {e}"
            ) from e
        if result:
            logger.info(f"✓ {operation} resuelto desde MongoDB (fallback)")
        return result

    # ──────────────────────────────────────────────────────────────────────────
    # Interfaz pública
    # ──────────────────────────────────────────────────────────────────────────

    def insert(self, task: Task) -> None:
        self._dispatch_write(
            operation="insert",
            sql_func=lambda: self._sql_repo.insert(task),
            mongo_func=lambda: self._mongo_repo.insert(task),
            entity_id=task.id,
        )

    def apply_changes(self, task_id: UUID, changes: dict[str, Any]) -> None:
        self._dispatch_write(
            operation="update",
            sql_func=lambda: self._sql_repo.apply_changes(task_id, changes),
            mongo_func=lambda: self._mongo_repo.apply_changes(task_id, changes),
            entity_id=task_id,
        )

    def delete(self, task_id: UUID) -> bool:
        """
        Elimina en ambas BDD disponibles.

        Returns:
            True si al menos un backend eliminó la tarea.
        """
        results = self._dispatch_write(
            operation="delete",
            sql_func=lambda: self._sql_repo.delete(task_id),
            mongo_func=lambda: self._mongo_repo.delete(task_id),
            entity_id=task_id,
        )
        return any(results)

    def get(self, task_id: UUID) -> Task | None:
        return self._read(
            f"get({task_id})",
            lambda: self._sql_repo.get(task_id),
            lambda: self._mongo_repo.get(task_id),
        )

    def list_for_owner(self, owner_id: UUID) -> list[Task]:
        tasks = self._read(
            f"list_for_owner({owner_id})",
            lambda: self._sql_repo.list_for_owner(owner_id),
            lambda: self._mongo_repo.list_for_owner(owner_id),
        )
        return tasks or []
