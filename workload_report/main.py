from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from workload_report.api.reports import router as reports_router
from workload_report.core.logger import setup_logger
from workload_report.db.session import init_db

setup_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Ensure database tables exist before serving requests."""
    logger.info("Ensuring database tables exist")
    init_db()
    yield


def create_app() -> FastAPI:
    application = FastAPI(title="Team Workload Report", lifespan=lifespan)
    application.include_router(reports_router)

    @application.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
