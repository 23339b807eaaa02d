import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True, slots=True)
class Settings:
    orm: str
    database_url: str
    mongo_uri: str
    mongo_db_name: str
    event_dispatch: str
    event_workers: int
    log_level: str
    cors_origins: list[str]
    cors_allow_credentials: bool
    cors_allow_methods: list[str]
    cors_allow_headers: list[str]
    host: str
    port: int
    reload: bool


@lru_cache
def get_settings() -> Settings:
    return Settings(
        orm=os.getenv("ORM", "peewee").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///tasks.db"),
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "tasks"),
        event_dispatch=os.getenv("EVENT_DISPATCH", "sync").lower(),
        event_workers=int(os.getenv("EVENT_WORKERS", "2")),
        log_level=os.getenv("LOG_LEVEL", "info"),
        cors_origins=_as_list(os.getenv("CORS_ORIGINS", "*")),
        cors_allow_credentials=_as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", "true")),
        cors_allow_methods=_as_list(os.getenv("CORS_ALLOW_METHODS", "*")),
        cors_allow_headers=_as_list(os.getenv("CORS_ALLOW_HEADERS", "*")),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=_as_bool(os.getenv("RELOAD", "true")),
    )
