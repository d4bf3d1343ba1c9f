import uvicorn
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from participation.api.api import api_router
from participation.core.config import settings
from participation.core.exceptions import ParticipationAPIError, participation_api_error_handler
from participation.db.init_db import init_db
from participation.middleware.cors import setup_cors

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用启动时创建数据库表
    """
    logger.info(f"Starting {settings.PROJECT_NAME} (environment={settings.ENVIRONMENT})")
    init_db()
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan
)

app.add_exception_handler(ParticipationAPIError, participation_api_error_handler)
# Set all CORS enabled origins
setup_cors(app, settings)

app.include_router(api_router, prefix=settings.API_PREFIX)


if __name__ == '__main__':
    uvicorn.run(
        'participation.main:app',
        host='0.0.0.0',
        port=settings.BACKEND_PORT,
        reload=settings.ENVIRONMENT == "development"
    )
