# service_hours/core/db.py - SQLAlchemy database setup with connection pooling
from sqlalchemy import create_engine, text, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool, QueuePool
from typing import Callable, Generator, Optional, TypeVar
import logging
import time
import threading
from contextlib import contextmanager

from service_hours.core.config import settings
from service_hours.core.exceptions import (
    ConcurrencyConflict,
    DuplicateRecord,
    ServiceHoursError,
    StoreError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseManager:
    """Database manager with connection pooling and health monitoring"""

    def __init__(self):
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._initialized = False
        self._lock = threading.Lock()

    def initialize(self):
        """Initialize database engine and session maker"""
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            try:
                self.engine = self._create_engine()
                self.SessionLocal = sessionmaker(
                    autocommit=False,
                    autoflush=False,
                    bind=self.engine
                )

                self._setup_event_listeners()
                self._test_connection()

                self._initialized = True
                logger.info("Database initialized successfully")

            except Exception as e:
                logger.error(f"Failed to initialize database: {e}")
                raise

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine with optimized configuration"""
        engine_args = {
            "url": settings.DATABASE_URL,
            "echo": settings.DATABASE_ECHO or settings.DEV_LOG_SQL,
        }

        if settings.is_sqlite:
            engine_args.update({
                "poolclass": StaticPool,
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": 30,  # 30 second timeout for SQLite locks
                },
            })
        else:
            engine_args.update({
                "poolclass": QueuePool,
                "pool_size": settings.DATABASE_POOL_SIZE,
                "max_overflow": settings.DATABASE_MAX_OVERFLOW,
                "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
                "pool_recycle": settings.DATABASE_POOL_RECYCLE,
                "pool_pre_ping": True,
                "connect_args": {
                    "connect_timeout": 10,
                    "application_name": f"service_hours_{settings.ENV}",
                    "options": "-c timezone=UTC"
                }
            })

        return create_engine(**engine_args)

    def _setup_event_listeners(self):
        """Set up SQLAlchemy event listeners for monitoring"""

        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Set SQLite pragmas for reliability"""
            if settings.is_sqlite:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute("PRAGMA synchronous=NORMAL")
                cursor.close()

        @event.listens_for(self.engine, "before_cursor_execute")
        def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            if settings.is_development:
                context._query_start_time = time.time()

        @event.listens_for(self.engine, "after_cursor_execute")
        def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            """Log slow queries in development"""
            if settings.is_development and hasattr(context, '_query_start_time'):
                total = time.time() - context._query_start_time
                if total > 0.1:
                    logger.warning(f"Slow query ({total:.3f}s): {statement[:100]}...")

    def _test_connection(self):
        """Test database connection and log status"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

                if "postgresql" in settings.DATABASE_URL:
                    db_info = conn.execute(text("SELECT version()")).fetchone()
                    logger.info(f"Connected to PostgreSQL: {db_info[0][:50]}...")
                elif settings.is_sqlite:
                    db_info = conn.execute(text("SELECT sqlite_version()")).fetchone()
                    logger.info(f"Connected to SQLite: {db_info[0]}")

        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            raise

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get database session with automatic cleanup and error handling.

        Yields:
            Session: SQLAlchemy database session
        """
        if not self._initialized:
            self.initialize()

        session = self.SessionLocal()
        try:
            yield session
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self):
        """
        Context manager for database transactions with automatic rollback.

        Usage:
            with db_manager.transaction() as session:
                session.add(student)
                # Automatically commits on success, rolls back on error
        """
        if not self._initialized:
            self.initialize()

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Transaction error: {e}")
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """
        Perform database health check.

        Returns:
            Dict with health status information
        """
        if not self._initialized:
            self.initialize()

        try:
            start_time = time.time()

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            response_time = (time.time() - start_time) * 1000

            return {
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
                "database_url": settings.DATABASE_URL.split("@")[-1] if "@" in settings.DATABASE_URL else "local"
            }

        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e)
            }

    def close(self):
        """Close database connections and cleanup"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")


def run_atomic(
    session: Session,
    operation: Callable[[Session], T],
    *,
    retries: Optional[int] = None,
    name: str = "operation",
) -> T:
    """
    Run ``operation`` and commit it as a single unit of work.

    Versioned rows (students, service requests) make a concurrent writer's
    UPDATE match zero rows, which SQLAlchemy reports as ``StaleDataError``.
    On that error the unit is rolled back and ``operation`` re-runs from
    scratch against freshly loaded rows. Any other failure rolls back the
    whole unit and propagates, so a partially applied sequence is never
    committed.

    Raises:
        ConcurrencyConflict: retries exhausted
        DuplicateRecord: unique constraint violated
        StoreError: any other database failure
    """
    attempts = retries if retries is not None else settings.LEDGER_MAX_RETRIES
    if attempts < 1:
        raise ValueError(f"{name} needs at least one attempt, got retries={attempts}")

    for attempt in range(1, attempts + 1):
        try:
            result = operation(session)
            session.commit()
            return result
        except StaleDataError as e:
            session.rollback()
            logger.warning(f"Version conflict on {name} (attempt {attempt}/{attempts}): {e}")
        except IntegrityError as e:
            session.rollback()
            if "unique" in str(e.orig).lower():
                raise DuplicateRecord(f"{name} conflicts with an existing record") from e
            logger.error(f"Integrity error on {name}: {e}")
            raise StoreError(f"{name} violated a database constraint") from e
        except ServiceHoursError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error on {name}: {e}")
            raise StoreError(f"{name} failed; please retry") from e
        except Exception:
            session.rollback()
            raise

    raise ConcurrencyConflict(
        f"{name} kept conflicting with concurrent updates; please retry",
        attempts=attempts,
    )


# Create global database manager instance
db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency to get database session.

    Usage in FastAPI:
        @router.get("/students")
        def list_students(db: Session = Depends(get_db)):
            ...
    """
    yield from db_manager.get_session()


def get_engine() -> Engine:
    """Get SQLAlchemy engine instance"""
    if not db_manager._initialized:
        db_manager.initialize()
    return db_manager.engine


def get_session_maker() -> sessionmaker:
    """Get session maker for manual session creation"""
    if not db_manager._initialized:
        db_manager.initialize()
    return db_manager.SessionLocal


def health_check() -> dict:
    """Get database health status (convenience function)"""
    return db_manager.health_check()


__all__ = [
    "get_db",
    "get_engine",
    "get_session_maker",
    "health_check",
    "run_atomic",
    "db_manager",
]
