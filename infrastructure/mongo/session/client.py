from typing import Any

from pymongo import MongoClient
from pymongo.database import Database

from infrastructure.settings import get_settings

_client: MongoClient[Any] | None = None


def get_client() -> MongoClient[Any]:
    """
    Obtiene el cliente de MongoDB (Singleton).
    """
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongo_uri)
    return _client


def get_db() -> Database[Any]:
    """
    Obtiene la base de datos de MongoDB.

    Retorna:
        Database: La instancia de la base de datos de MongoDB.
    """
    return get_client()[get_settings().mongo_db_name]
