"""SQLAlchemy engine and session helpers."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..settings import settings

# Schema name the models are declared under. The engine maps it to the
# configured schema, or drops it entirely on SQLite which has no schemas.
MODEL_SCHEMA = "devices"

# ``Base`` is the parent class for every SQLAlchemy model defined in models/.
Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.startswith("sqlite:///:memory:?")


def build_engine(url: str | None = None, *, schema: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for ``url`` with the model schema translated for the backend."""

    url = url or settings.DB_URL
    echo = settings.DB_ECHO if echo is None else echo
    kwargs: dict = {"echo": echo}
    if url.startswith("sqlite"):
        # Sessions are used from FastAPI worker threads.
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            # One shared connection, otherwise every checkout sees an empty database.
            kwargs["poolclass"] = StaticPool
        target_schema = None
    else:
        kwargs["pool_pre_ping"] = True
        target_schema = schema or settings.DB_SCHEMA
    engine = create_engine(url, **kwargs)
    return engine.execution_options(schema_translate_map={MODEL_SCHEMA: target_schema})


def build_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory; each gateway call opens and closes its own session."""

    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
