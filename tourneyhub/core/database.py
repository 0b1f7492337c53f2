import logging
from contextlib import contextmanager
from threading import Lock
from typing import Dict, Optional, Tuple

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tourneyhub.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# One engine (and connection pool) per database endpoint/credential pair.
# Requests may point at different databases through headers.
_engines: Dict[Tuple[str, Optional[str]], Engine] = {}
_session_factories: Dict[Engine, sessionmaker] = {}
_registry_lock = Lock()


def _enable_immediate_transactions(engine: Engine) -> None:
    """
    Make every SQLite transaction start with BEGIN IMMEDIATE.

    pysqlite otherwise opens a deferred transaction lazily, so two sessions can
    both read and then fail when upgrading to a write lock. Taking the write
    lock up front serializes check-then-write sequences across connections.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str, auth_token: Optional[str] = None) -> Engine:
    connect_args = {}
    if url.startswith("sqlite+libsql"):
        if auth_token:
            connect_args = {"auth_token": auth_token}
    elif url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool workers
        connect_args = {"check_same_thread": False, "timeout": 30}

    engine = create_engine(url, connect_args=connect_args)
    if engine.dialect.driver == "pysqlite":
        _enable_immediate_transactions(engine)
    return engine


def get_engine(url: Optional[str] = None, auth_token: Optional[str] = None) -> Engine:
    if url is None:
        url = settings.DATABASE_URL
        auth_token = auth_token or settings.DATABASE_AUTH_TOKEN
    key = (url, auth_token)
    with _registry_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = build_engine(url, auth_token)
            if settings.CREATE_TABLES:
                from tourneyhub import models  # noqa: F401  registers every table on Base.metadata
                Base.metadata.create_all(bind=engine)
            _engines[key] = engine
            logger.info("Opened database engine for %s", engine.url.render_as_string(hide_password=True))
        return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    with _registry_lock:
        factory = _session_factories.get(engine)
        if factory is None:
            factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
            _session_factories[engine] = factory
        return factory


def SessionLocal(url: Optional[str] = None, auth_token: Optional[str] = None):
    engine = get_engine(url, auth_token)
    return get_session_factory(engine)()


@contextmanager
def atomic(db: Session):
    """Commit everything done inside the block as one unit, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
