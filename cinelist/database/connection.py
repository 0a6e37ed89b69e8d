"""
Engine and transaction management for the CineList store.

Catalog and watchlist operations each open exactly one ``session_scope``;
nothing else in the package commits.
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from cinelist.database.models import Base


DEFAULT_DB_PATH = "data/cinelist.db"
SQLITE_BUSY_TIMEOUT = 30.0


def sqlite_url(db_path: str) -> str:
    """Absolute ``sqlite:///`` URL for a database file, creating its directory."""
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    return f"sqlite:///{os.path.abspath(db_path)}"


def _enable_foreign_keys(dbapi_conn, connection_record):
    # Off by default in SQLite; team member and watchlist cascades depend on it
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Owns the engine and hands out sessions.

    An in-memory SQLite database (``sqlite://``) lives in one connection that
    StaticPool shares between sessions. File databases and other backends
    get a regular pool, so each session owns its connection and transaction.
    SQLite connections switch foreign keys on.

    Sessions never expire on commit, so Movie rows returned by the catalog
    stay readable after their scope has closed.
    """

    def __init__(
        self,
        db_path: str = DEFAULT_DB_PATH,
        echo: bool = False,
        database_url: Optional[str] = None,
        busy_timeout: float = SQLITE_BUSY_TIMEOUT
    ):
        """
        Args:
            db_path: SQLite file used when no database_url is given
            echo: Log every SQL statement
            database_url: Full SQLAlchemy URL
            busy_timeout: Seconds a SQLite file connection waits for a lock
        """
        self.database_url = database_url or sqlite_url(db_path)
        url = make_url(self.database_url)
        self.is_sqlite = url.get_backend_name() == "sqlite"
        self.is_memory = self.is_sqlite and url.database in (None, "", ":memory:")

        if self.is_memory:
            # The database lives in its connection, so every session shares it
            self.engine = create_engine(
                self.database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool
            )
        elif self.is_sqlite:
            # One connection per session; writers wait on the file lock
            self.engine = create_engine(
                self.database_url,
                echo=echo,
                connect_args={"check_same_thread": False, "timeout": busy_timeout}
            )
        else:
            self.engine = create_engine(self.database_url, echo=echo, pool_pre_ping=True)

        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False
        )

    def create_tables(self):
        """Create missing tables. Existing tables are left untouched."""
        Base.metadata.create_all(bind=self.engine)

    def reset_database(self):
        """Drop every CineList table and create them again. Destroys all data."""
        Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Bare session; the caller commits or rolls back and closes it."""
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        One transaction: commit once when the block exits normally, roll
        back and re-raise when it raises.

        Usage:
            with db_manager.session_scope() as session:
                crud.create_movie(session, movie)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """Dispose of the engine and its pooled connection."""
        self.engine.dispose()


_db_manager = None


def get_db_manager(
    db_path: str = DEFAULT_DB_PATH,
    echo: bool = False,
    database_url: Optional[str] = None
) -> DatabaseManager:
    """
    Process-wide DatabaseManager. Arguments only take effect on the first call.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(db_path=db_path, echo=echo, database_url=database_url)
    return _db_manager
