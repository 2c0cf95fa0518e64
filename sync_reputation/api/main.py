"""
sync_reputation.api.main — FastAPI application entry point
===========================================================

Run with::

    uvicorn sync_reputation.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from sync_reputation import __version__  # noqa: E402
from sync_reputation.api.deps import get_engine  # noqa: E402
from sync_reputation.api.routes.admin import router as admin_router  # noqa: E402
from sync_reputation.api.routes.badges import router as badges_router  # noqa: E402
from sync_reputation.api.routes.reviews import router as reviews_router  # noqa: E402
from sync_reputation.database.engine import init_db  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine and verify tables."""
    engine = app.dependency_overrides.get(get_engine, get_engine)()
    init_db(engine)
    logger.info("SynC reputation API started — engine ready (%s)", engine.url.database)
    yield
    logger.info("SynC reputation API shutting down")


app = FastAPI(
    title="SynC Reputation API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(badges_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
