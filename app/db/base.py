from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.settings import SQLALCHEMY_DATABASE_URL, SQLALCHEMY_ECHO

ORDER_STEP = 10


class Base(DeclarativeBase):
    pass


def configure_sqlite(engine) -> None:
    """
    Turn on foreign keys (SQLite ignores ON DELETE CASCADE otherwise) and
    let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest correctly.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_async_engine(SQLALCHEMY_DATABASE_URL, echo=SQLALCHEMY_ECHO)

if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

async_session_maker = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_db_session():
    async with async_session_maker() as session:
        yield session
