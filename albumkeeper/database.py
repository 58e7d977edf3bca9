"""Database connection and initialization."""

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from albumkeeper.config import settings

# Import all models so SQLModel registers them
import albumkeeper.models  # noqa: F401


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign keys enabled."""
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", settings.db_timeout_seconds)
        kwargs["connect_args"] = connect_args
    else:
        kwargs.setdefault("pool_pre_ping", True)
        kwargs.setdefault("pool_timeout", settings.db_timeout_seconds)

    new_engine = create_engine(url, echo=settings.debug, **kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _record):
            # Per-connection setting, SQLite forgets it on reconnect
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.sqlalchemy_url)


def init_db(target: Engine | None = None) -> None:
    """Create all tables and enable WAL mode on SQLite."""
    target = target or engine
    SQLModel.metadata.create_all(target)

    if target.dialect.name == "sqlite":
        # Enable WAL mode for better concurrent read performance
        with target.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql("PRAGMA synchronous=NORMAL")
            conn.commit()


def get_session():
    """FastAPI dependency: yields a database session."""
    with Session(engine) as session:
        yield session
