from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import logging

router = APIRouter(prefix="/health", tags=["Health Check"])
logger = logging.getLogger(__name__)


@router.get("")
async def basic_health_check(request: Request):
    """Basic application health check"""
    config = request.app.state.settings
    return {
        "status": "healthy",
        "service": config.APP_NAME,
        "version": config.APP_VERSION,
    }


@router.get("/store")
async def store_health_check(request: Request):
    """Store health check; 503 when the backing store cannot be reached"""
    health_data = await request.app.state.store.health_check()

    if health_data.get("status") != "healthy":
        logger.warning(f"Store health check failed: {health_data}")
        return JSONResponse(status_code=503, content=health_data)

    return health_data
