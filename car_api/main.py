from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from car_api import __version__
from car_api.core import environment
from car_api.core.db import engine, ensure_sqlite_directory
from car_api.core.logging import setup_logging
from car_api.exceptions import register_exception_handlers
from car_api.routers import cars, health, metrics
from car_api.scripts.seed_data import clear_database, init_db, reset_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_sqlite_directory(engine.url)

    if app.state.clear_db:
        await clear_database(engine)
    elif app.state.reset_db:
        await reset_database(engine)
    else:
        await init_db(engine)

    try:
        yield
    finally:
        await engine.dispose()


def create_app(
    enable_metrics: Optional[bool] = None,
    reset_db: Optional[bool] = None,
    clear_db: Optional[bool] = None,
) -> FastAPI:
    if enable_metrics is None:
        enable_metrics = environment.is_metrics_enabled()

    logger.info("Production mode enabled" if environment.is_production() else "Development mode enabled")

    app = FastAPI(title="Car Records API", version=__version__, lifespan=lifespan)
    app.state.reset_db = environment.should_reset_db() if reset_db is None else reset_db
    app.state.clear_db = environment.should_clear_db() if clear_db is None else clear_db

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(cars.router)

    if enable_metrics:
        logger.info("Enabled metrics")
        app.include_router(metrics.router)
    else:
        logger.info("Disabled metrics")

    return app


setup_logging()
app = create_app()
