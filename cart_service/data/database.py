# cart_service/data/database.py
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cart_service.utils.logging import get_logger
from cart_service.utils.retry import db_connect_retry
from cart_service.utils.settings import Settings, redact_url

logger = get_logger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.db_timeout_seconds,
            },
        )
        #sqlite ignores FK constraints unless asked per connection
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"connect_timeout": max(1, int(settings.db_timeout_seconds))},
        )

    logger.info(f"Database engine created for {redact_url(url)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def wait_for_database(engine: Engine, attempts: int = 5) -> None:
    """Block until the database answers a ping, retrying connection errors."""

    @db_connect_retry(attempts)
    def _ping():
        logger.info("Pinging database")
        ping(engine)

    _ping()
    logger.info("Database is ready")


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
