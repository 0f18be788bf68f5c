"""Database connection and session management."""
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    """
    Hand transaction control for SQLite connections to SQLAlchemy.

    pysqlite delays BEGIN until the first write, which lets two writers read the
    same snapshot. Emitting BEGIN ourselves allows write transactions to start
    with BEGIN IMMEDIATE and take the database write lock up front.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


class Database:
    """Owns the engine and session factories for one application instance."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.is_sqlite = database_url.startswith("sqlite")

        if self.is_sqlite:
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
            _configure_sqlite(self.engine)
        elif "pooler.supabase.com" in database_url or database_url.endswith(":6543"):
            # Pooler connections must not be pooled again client-side
            self.engine = create_engine(database_url, poolclass=NullPool, echo=echo)
        else:
            self.engine = create_engine(
                database_url,
                pool_size=20,
                max_overflow=10,
                echo=echo,
            )

        # Write transactions on SQLite take the write lock before reading
        write_engine = self.engine.execution_options(sqlite_begin="IMMEDIATE")

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.WriteSessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=write_engine,
        )

        # A deferred SQLite transaction keeps its first read snapshot until it ends;
        # other backends need REPEATABLE READ for the same guarantee
        snapshot_engine = (
            self.engine
            if self.is_sqlite
            else self.engine.execution_options(isolation_level="REPEATABLE READ")
        )
        self.SnapshotSessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=snapshot_engine,
        )

    def create_all(self) -> None:
        """Create all tables (in production, use migrations)."""
        # Import models so they register on Base.metadata
        from formulary import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a read scope; the caller commits if it writes."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def snapshot(self) -> Iterator[Session]:
        """Provide a read scope in which every query sees the same committed state."""
        db = self.SnapshotSessionLocal()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Provide a write transaction that commits on success and rolls back on error."""
        db = self.WriteSessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for getting database session."""
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
