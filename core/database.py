from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, orm
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel


class Database:
    def __init__(self, db_url: str, echo: bool = False) -> None:
        if db_url.startswith("sqlite"):
            # in-memory sqlite must share one connection across threads
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if db_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {"pool_pre_ping": True}
        self._engine = create_engine(db_url, echo=echo, **engine_kwargs)
        self._session_factory = orm.scoped_session(
            orm.sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self._engine,
            ),
        )

    def create_database(self) -> None:
        # Use SQLModel metadata to create tables for models defined with SQLModel
        import models  # noqa: F401  registers the tables

        SQLModel.metadata.create_all(self._engine)

    def drop_database(self) -> None:
        SQLModel.metadata.drop_all(self._engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session: Session = self._session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
