# storefront/api/routers/health.py
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    try:
        request.app.state.database.ping()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": "Storefront API", "database": "unreachable"},
        )
    return {"status": "healthy", "service": "Storefront API", "database": "ok"}
