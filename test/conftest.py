import os

# Bases en memoria para toda la suite; debe ejecutarse antes de importar infrastructure.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("ORM", "peewee")
os.environ.setdefault("EVENT_DISPATCH", "sync")
