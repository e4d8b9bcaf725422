from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from service.store import ensure_directories


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    ensure_directories()
    logger.info(f"Uploads: {settings.UPLOAD_DIR}")
    logger.info(f"Results: {settings.RESULTS_DIR}")

    yield

    # === 종료 ===
    logger.info("Shutting down")
