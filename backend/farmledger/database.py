"""
Database engine, session factory and declarative base.
"""
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from farmledger.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.is_sqlite else {},
    pool_pre_ping=not settings.is_sqlite,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def configure_sqlite(target_engine) -> None:
    """Foreign keys on, and transactions begun explicitly.

    SQLite ignores ON DELETE CASCADE unless the pragma is set per connection,
    and pysqlite's implicit BEGIN turns SAVEPOINT into a commit point.
    """

    @event.listens_for(target_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


if settings.is_sqlite:
    configure_sqlite(engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    if not settings.AUTO_CREATE_TABLES:
        return
    import farmledger.models  # noqa: F401  (registers every mapper on Base)

    Base.metadata.create_all(bind=engine)
