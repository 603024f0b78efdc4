# shelfstore/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from shelfstore.config import settings

# Execution option that makes a SQLite transaction take the write lock up front
IMMEDIATE = "sqlite_begin_immediate"


def make_engine(url: str) -> Engine:
    # SQLite needs check_same_thread=False and explicit foreign key enforcement
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            # Readers stay lock-free; only transactions that ask for it serialize
            if conn.get_execution_options().get(IMMEDIATE):
                conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine
    return create_engine(url, pool_pre_ping=True)


SQLALCHEMY_DATABASE_URL = settings.database_url

engine = make_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def begin_write(db):
    """Start a fresh transaction on ``db`` that holds the database write lock.

    Work already pending on the session is committed first. On SQLite this is
    ``BEGIN IMMEDIATE``, so check-then-write sequences serialize across
    processes; other backends rely on row locks taken inside the transaction.
    """
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={IMMEDIATE: True})

def init_db():
    # Register every mapped table on Base.metadata before creating them
    import shelfstore.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
