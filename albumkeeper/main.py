"""AlbumKeeper Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from albumkeeper.config import settings
from albumkeeper.database import init_db

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize logging, database and thumbnail maintenance on startup."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    from albumkeeper.services.maintenance_worker import thumbnail_worker
    thumbnail_worker.start()

    yield

    thumbnail_worker.stop()


app = FastAPI(
    title="AlbumKeeper",
    description="Album store and thumbnail maintenance for a self-hosted photo server",
    version=VERSION,
    lifespan=lifespan,
)

# --- Register API routers ---
from albumkeeper.api.maintenance import router as maintenance_router  # noqa: E402

API_PREFIX = "/api/v1"

app.include_router(maintenance_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Health check / server info."""
    return {
        "name": settings.server_name,
        "version": VERSION,
        "status": "running",
    }


@app.get("/api/v1/health")
def health():
    return {"status": "ok"}
