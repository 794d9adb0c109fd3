"""
A social leaderboard backend for brain-training game scores.

Run with ``python main.py`` or ``uvicorn main:app``.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from app.api.router import include_routers
from app.core.config import settings
from app.core.database import engine
from app.core.exception_handlers import register_exception_handlers
from app.core.startup import initialize_database, shutdown_database

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
# SQL echo is only wanted when asked for explicitly
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} on {settings.APP_URL}")
    initialize_database()
    yield
    logger.info(f"Stopping {settings.APP_NAME}")
    shutdown_database()


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Users register, submit per-game personal bests, befriend each other
    and compare rankings: global, friends-only, per game and champions.
    """,
    version="1.0.0",
    lifespan=lifespan
)

register_exception_handlers(app)
include_routers(app)


@app.get("/health", tags=["health"])
def health():
    """Liveness plus a round trip to the database."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "app": settings.APP_NAME}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
