"""
Logistics API
FastAPI application entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from logistics.api.deps import close_logistics_service
from logistics.api.routes import shipping
from logistics.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.APP_NAME} starting ({settings.ENVIRONMENT})")
    yield
    await close_logistics_service()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.include_router(shipping.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": settings.APP_NAME, "status": "operational"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "logistics.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
