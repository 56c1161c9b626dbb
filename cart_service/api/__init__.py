# cart_service/api/__init__.py
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cart_service.api.routers import carts
from cart_service.api.routers.health import router as health_router
from cart_service.data.database import (
    Base,
    create_db_engine,
    create_session_factory,
    wait_for_database,
)
from cart_service.utils.logging import configure_logging, get_logger
from cart_service.utils.settings import Settings, load_settings, redact_url

# register all models in Base.metadata before create_all
import cart_service.data.models  # noqa: F401

logger = get_logger(__name__)


async def _invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "invalid body", "errors": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger.info(f"config: using DB={redact_url(settings.database_url)}, PORT={settings.port}")

    engine = create_db_engine(settings)
    wait_for_database(engine, attempts=settings.db_connect_attempts)

    if settings.create_tables:
        logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
        Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title="Cart Service",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_exception_handler(RequestValidationError, _invalid_body)

    app.include_router(health_router)
    app.include_router(carts.router)

    return app
