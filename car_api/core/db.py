import os

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from car_api.core.environment import get_database_url


DATABASE_URL = get_database_url()


def ensure_sqlite_directory(url) -> None:
    """Creates the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite" or not parsed.database or parsed.database == ":memory:":
        return
    directory = os.path.dirname(parsed.database)
    if directory:
        os.makedirs(directory, exist_ok=True)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves FK enforcement off unless asked per connection
    module = type(dbapi_connection).__module__
    if "sqlite" not in module:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    return create_async_engine(
        url,
        echo=False,
        future=True,
    )


engine = build_engine()

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)
Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# largest value an INTEGER primary key can hold in SQLite and Postgres BIGINT
MAX_ROW_ID = 2 ** 63 - 1


def is_valid_row_id(value) -> bool:
    return isinstance(value, int) and 1 <= value <= MAX_ROW_ID
