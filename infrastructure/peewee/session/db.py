from playhouse.db_url import connect

from infrastructure.settings import get_settings

db = connect(get_settings().database_url)


def get_db():
    return db
