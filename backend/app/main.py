"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    logger.info("Dialogue file: %s", settings.DIALOGUE_FILE)
    yield


app = FastAPI(
    title="Dialogue Editor API",
    description="Backend API for the branching dialogue tree editor",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# --- Routes ---
from app.api.routes import dialogue, graph  # noqa: E402

app.include_router(dialogue.router, prefix="/api/dialogue", tags=["dialogue"])
app.include_router(graph.router, prefix="/api/graph", tags=["graph"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}
