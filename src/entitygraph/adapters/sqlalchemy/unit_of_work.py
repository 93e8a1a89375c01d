"""SQLAlchemy-backed unit of work for parent graphs.

``startup`` binds one engine for the process; every ``SqlAlchemyParentUnitOfWork``
then opens its own session on that engine for the length of a ``with`` block.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal, Self

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from entitygraph.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from entitygraph.adapters.sqlalchemy.repositories import SqlAlchemyParentRepository
from entitygraph.config import get_database_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database is used before ``startup`` or bound twice."""


class _Binding:
    """The engine bound by ``startup`` and the session factory made from it."""

    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    @classmethod
    def bind(cls, engine: Engine) -> None:
        cls.engine = engine
        cls.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def release(cls) -> None:
        if cls.engine is not None:
            cls.engine.dispose()
        cls.engine = None
        cls.sessions = None

    @classmethod
    def require_sessions(cls) -> sessionmaker[Session]:
        if cls.sessions is None:
            raise StartupError("database not started; call startup() first")
        return cls.sessions


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the engine, map the domain classes and create missing tables."""

    if _Binding.engine is not None and not force:
        raise StartupError("database already started; pass force=True to rebind")

    resolved_engine = engine or create_engine(database_uri or get_database_config().url)
    start_mappers()
    create_all_tables(resolved_engine)
    _Binding.bind(resolved_engine)
    log.debug("Database bound to %s", resolved_engine.url)


def configured_engine() -> Engine | None:
    return _Binding.engine


def is_started() -> bool:
    return _Binding.engine is not None


def shutdown() -> None:
    """Dispose the bound engine so the next ``startup`` starts clean."""

    _Binding.release()


class SqlAlchemyParentUnitOfWork:
    """One session, one transaction, exposing the parent repository.

    Construction fails with ``StartupError`` when no engine is bound. The
    session only exists inside the ``with`` block; ``commit`` must be called
    explicitly, and an exception leaving the block rolls the session back.
    """

    def __init__(self) -> None:
        self._sessions = _Binding.require_sessions()
        self._session: Session | None = None
        self._parents: SqlAlchemyParentRepository | None = None

    def __enter__(self) -> Self:
        if self._session is not None:
            raise StartupError("unit of work is already open")
        self._session = self._sessions()
        self._parents = SqlAlchemyParentRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._parents = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("unit of work is not open")
        return self._session

    @property
    def parents(self) -> SqlAlchemyParentRepository:
        if self._parents is None:
            raise StartupError("unit of work is not open")
        return self._parents

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from entitygraph.domain.ports.unit_of_work import ParentUnitOfWork

    _uow_check: ParentUnitOfWork = SqlAlchemyParentUnitOfWork()
