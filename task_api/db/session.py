from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def create_db_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine backing the process-wide pool."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # A single shared connection keeps the in-memory database alive
        # across threadpool workers.
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a sessionmaker bound to ``engine``.

    Instances stay readable after commit so services can hand them back
    once the session is closed.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
