from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from cart_service.data.database import ping
from cart_service.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz", response_class=PlainTextResponse)
def healthz(request: Request):
    try:
        ping(request.app.state.engine)
    except SQLAlchemyError as e:
        logger.warning(f"Health check failed: {e}")
        return PlainTextResponse("database unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return PlainTextResponse("ok")
