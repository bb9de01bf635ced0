# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy engine/session factories, declarative base, and the FastAPI
dependency that provides a DB session per request.

There is no module-level engine: ``main.create_app`` builds one per
application and keeps the session factory on ``app.state``.
"""

from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Create the engine for *database_url*.

    SQLite: the parent directory of the database file is created, the
    connection may be shared with the threadpool that runs sync endpoints,
    and writers wait on the file lock instead of failing immediately.
    Other backends: pool_pre_ping keeps idle connections alive across
    MySQL's wait_timeout.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", 30)
        return create_engine(url, connect_args=connect_args, **kwargs)
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine: Engine) -> None:
    """CREATE TABLE IF NOT EXISTS for every model."""
    # Model modules register themselves on Base.metadata at import
    import models.tag   # noqa: F401
    import models.like  # noqa: F401

    Base.metadata.create_all(engine)


def get_db(request: Request):
    """
    FastAPI dependency.  Yields a session for the duration of the request,
    then closes it.  Use with Depends(get_db).
    """
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
