import logging
import threading
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Render/Heroku hand out postgres:// but SQLAlchemy + psycopg3 needs postgresql+psycopg://"""
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


class Database:
    """Data-access handle: one engine + session factory, created on first use."""

    def __init__(self, url: str, pool_size: int = 5, max_overflow: int = 10, echo: bool = False):
        self.url = normalize_database_url(url)
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            echo=settings.DB_ECHO,
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = self._create_engine()
                    self._session_factory = sessionmaker(
                        autocommit=False, autoflush=False, bind=self._engine
                    )
                    logger.info("Database engine initialized (%s)", self._engine.dialect.name)
        return self._engine

    def _create_engine(self) -> Engine:
        if self.url.startswith("sqlite"):
            options = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite+pysqlite://"):
                options["poolclass"] = StaticPool
            return create_engine(self.url, echo=self.echo, **options)

        # Keep the session in UTC so EXTRACT(HOUR ...) on timestamptz is UTC
        return create_engine(
            self.url,
            pool_pre_ping=True,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            echo=self.echo,
            connect_args={"options": "-c timezone=utc"},
        )

    def session(self) -> Session:
        self.engine
        return self._session_factory()

    def create_all(self):
        # Import models so every table is registered on Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def dispose(self):
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                self._session_factory = None
                logger.info("Database engine disposed")


# Dependency for FastAPI routes
def get_db(request: Request):
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
