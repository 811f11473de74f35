"""Database connection and session management."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings


def configure_sqlite(engine):
    """Enable foreign keys and SAVEPOINT support on a pysqlite engine.

    pysqlite defers BEGIN until the first DML statement, which breaks
    nested transactions. Take over transaction control so SAVEPOINT works.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


# Configure engine based on database type
_engine_options = {}

if settings.database_url.startswith("sqlite"):
    # SQLite: no pool settings needed
    _engine_options = {
        "connect_args": {"check_same_thread": False}
    }
else:
    # PostgreSQL: full connection pool, read committed
    _engine_options = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "isolation_level": "READ COMMITTED",
    }

engine = create_engine(settings.database_url, **_engine_options)

if settings.database_url.startswith("sqlite"):
    configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
