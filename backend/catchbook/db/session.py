"""Database engine and sessions. SQLite compatible with connection pooling."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool


def make_engine(database_url: str) -> Engine:
    connect_args = (
        {"check_same_thread": False}
        if database_url.startswith("sqlite")
        else {}
    )

    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory SQLite: one shared connection, or every session sees an empty DB
            return create_engine(
                database_url,
                connect_args=connect_args,
                poolclass=StaticPool
            )
        # SQLite file: Use NullPool for thread-safety
        return create_engine(
            database_url,
            connect_args=connect_args,
            poolclass=NullPool
        )

    # PostgreSQL/MySQL: Use QueuePool with sensible defaults
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_size=5,  # Number of persistent connections
        max_overflow=10,  # Max temporary connections
        pool_timeout=30,  # Seconds to wait for connection
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True  # Verify connection health
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False: rows stay readable after the session closes
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
