from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from infrastructure.settings import get_settings

DATABASE_URL = get_settings().database_url

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def get_session() -> Session:
    return SessionLocal()


def init_db() -> None:
    # Importa los modelos para que queden registrados en Base.metadata.
    from infrastructure.sqlalchemy.model import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
