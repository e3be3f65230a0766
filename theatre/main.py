# theatre/main.py
import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from theatre import config
from theatre.database import connect
from theatre.logging_config import setup_logging
from theatre.routes import admin, auth, booking, profile, reviews, shows
from theatre.state import AppState

logger = logging.getLogger(__name__)


def create_app(database=None, rng: Optional[random.Random] = None,
               availability: float = config.SEAT_AVAILABILITY,
               seed_catalog: bool = config.SEED_CATALOG,
               configure_logging: bool = True) -> FastAPI:
    """Build the API. Without ``database`` a Mongo connection is opened from config."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if configure_logging:
            setup_logging(config.LOG_LEVEL, config.LOG_JSON)
        client = None
        db = database
        if db is None:
            client, db = connect()
        app.state.theatre = AppState.build(db, rng=rng, availability=availability)
        await app.state.theatre.start(seed_catalog=seed_catalog)
        logger.info("Theatre booking service started")
        yield
        app.state.theatre.stop()
        if client is not None:
            client.close()

    app = FastAPI(title="Theatre Booking System", lifespan=lifespan)

    # Include routers with appropriate prefixes
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(shows.router, prefix="/shows", tags=["Shows"])
    app.include_router(booking.router, prefix="/booking", tags=["Booking"])
    app.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
    app.include_router(profile.router, prefix="/profile", tags=["Profile"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=None)


if __name__ == "__main__":
    run()
