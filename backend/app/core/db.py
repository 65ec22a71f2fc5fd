from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import Settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the engine from an explicit Settings instance.

    In-memory SQLite (used by the test-suite) needs a single shared
    connection that can cross FastAPI's threadpool.
    """
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DB_ECHO, **kwargs)

    return create_engine(url, echo=settings.DB_ECHO, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
