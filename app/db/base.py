"""
Database session and base configuration.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.core.config import settings


def _create_engine(database_url: str):
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        # Local runs and tests; in-memory databases must share one connection
        in_memory = url.database in (None, "", ":memory:")
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if in_memory else None,
        )

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    if settings.ENV == "production":
        # Production: no pooling behind the platform's connection pooler
        return create_engine(
            database_url,
            poolclass=NullPool,
            pool_pre_ping=True,
            connect_args={
                "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"
            }
        )

    # Development: Use small pool
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=3600
    )


engine = _create_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
