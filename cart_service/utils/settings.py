# cart_service/utils/settings.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str = "0.0.0.0"
    port: int = 8080
    db_timeout_seconds: float = 3.0
    db_connect_attempts: int = 5
    create_tables: bool = True
    log_level: str = "INFO"


def _getenv(key: str, default: str) -> str:
    value = os.getenv(key)
    return value if value else default


def _getbool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if not value:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = _getenv("POSTGRES_HOST", "localhost")
    port = _getenv("POSTGRES_PORT", "5432")
    user = _getenv("APP_DB_USER", _getenv("POSTGRES_USER", "postgres"))
    password = _getenv("APP_DB_PASSWORD", _getenv("POSTGRES_PASSWORD", "postgres"))
    name = _getenv("POSTGRES_DB", "simple_ecommerce")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"


def redact_url(url: str) -> str:
    """Hide credentials in a DSN before it goes to the logs."""
    if "@" not in url:
        return url
    head, tail = url.rsplit("@", 1)
    scheme, sep, _ = head.partition("://")
    if not sep:
        return "****@" + tail
    return f"{scheme}://****@{tail}"


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        database_url=build_database_url(),
        host=_getenv("HOST", "0.0.0.0"),
        port=int(_getenv("PORT", "8080")),
        db_timeout_seconds=float(_getenv("DB_TIMEOUT_SECONDS", "3")),
        db_connect_attempts=int(_getenv("DB_CONNECT_ATTEMPTS", "5")),
        create_tables=_getbool("CREATE_TABLES", True),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
    )
