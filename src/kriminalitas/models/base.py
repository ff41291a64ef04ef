"""Base model configuration and the database store handle."""
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from sqlalchemy import Column, DateTime, MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, as_declarative, declared_attr, sessionmaker
from sqlalchemy.sql import func

from kriminalitas.utils.config import DatabaseSettings
from kriminalitas.utils.logging import get_logger

logger = get_logger(__name__)

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


@as_declarative(metadata=metadata)
class Base:
    """Base class for all models."""

    id: Any
    __name__: str

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(DateTime, default=func.now(), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime,
        default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Store:
    """Explicit handle over the connection pool.

    Open it once at process start and close it at shutdown. Every unit of
    work goes through :meth:`transaction`, which commits when the block
    exits cleanly and rolls back on any exception.
    """

    def __init__(
        self,
        database: DatabaseSettings,
        engine_factory: Callable[..., Engine] = create_engine,
    ):
        self.database = database
        self.engine_factory = engine_factory
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Store":
        if self.is_open:
            return self

        self.engine = self.engine_factory(
            self.database.url,
            pool_size=self.database.pool_size,
            max_overflow=self.database.max_overflow,
            pool_pre_ping=True,
            connect_args={
                "options": f"-c statement_timeout={self.database.statement_timeout_ms}"
            },
            echo=False,
        )
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )
        logger.info(
            "Database store opened",
            host=self.database.host,
            database=self.database.database,
            pool_size=self.database.pool_size,
        )
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Database store closed")

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        if self.session_factory is None:
            raise RuntimeError("Store is not open")

        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
