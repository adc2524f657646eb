"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from taskreward.logging_config import get_logger
from taskreward.settings import settings
from taskreward.storage.models import Base

logger = get_logger(__name__)

# pysqlite's own default for the ``timeout`` connect argument
SQLITE_BUSY_TIMEOUT_MS = 5000


class Database:
    """Database connection manager."""

    def __init__(self, database_url: str | None = None):
        """Initialize database connection.

        Args:
            database_url: Database URL (defaults to settings)
        """
        self.database_url = database_url or settings.database_url
        self.is_sqlite = self.database_url.startswith("sqlite")

        connect_args = {}
        if self.is_sqlite:
            # Sessions are handed to FastAPI's worker threads
            connect_args["check_same_thread"] = False
            connect_args["timeout"] = SQLITE_BUSY_TIMEOUT_MS / 1000
        self.engine = create_engine(
            self.database_url,
            echo=False,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

        if self.is_sqlite:
            # A per-session lock timeout must not leak to the next borrower
            @event.listens_for(self.engine, "checkin")
            def _reset_busy_timeout(dbapi_connection, connection_record):
                if dbapi_connection is None:
                    return
                dbapi_connection.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")

        logger.info("database_initialized", url=self.engine.url.render_as_string(hide_password=True))

    def create_tables(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("tables_created")

    def drop_tables(self) -> None:
        """Drop all tables from the database."""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("tables_dropped")

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()

    @contextmanager
    def session(self, timeout: float | None = None) -> Generator[Session, None, None]:
        """Provide a transactional scope for database operations.

        Everything done inside the block is committed together when it
        exits normally and rolled back if anything raises.

        Args:
            timeout: Seconds any single statement may wait on a lock
                (SQLite busy timeout, PostgreSQL statement timeout)

        Yields:
            Database session
        """
        session = self.SessionLocal()
        try:
            if timeout is not None:
                self._apply_timeout(session, timeout)
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _apply_timeout(self, session: Session, timeout: float) -> None:
        millis = max(1, int(timeout * 1000))
        dialect = self.engine.dialect.name
        if dialect == "sqlite":
            session.connection().exec_driver_sql(f"PRAGMA busy_timeout = {millis}")
        elif dialect == "postgresql":
            # Scoped to the current transaction
            session.connection().exec_driver_sql(f"SET LOCAL statement_timeout = {millis}")
        else:
            logger.debug("session_timeout_unsupported", dialect=dialect)


# Global database instance
db = Database()
