"""
Text Statistics Engine - Live Text Statistics API
=================================================

FastAPI application state: logging setup, the app object, and the single
owned document session handed to routes through ``get_session``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request

from analysis_router import router as analysis_router
from config import Config, config
from core.document_session import DocumentSession
from kv_store import open_store

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Text Statistics Engine",
    description="Live text statistics and keyword density for an editable document",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Routers
app.include_router(analysis_router)


def create_session(settings: Optional[Config] = None) -> DocumentSession:
    """Open the configured store and load a session from it."""
    settings = settings or config
    session = DocumentSession(
        store=open_store(settings.STORE_PATH),
        density_basis=settings.KEYWORD_DENSITY_BASIS,
        default_rates={
            "ReadingTime": settings.STATISTICS.reading_rate,
            "SpeakingTime": settings.STATISTICS.speaking_rate,
            "HandWritingTime": settings.STATISTICS.hand_writing_rate,
        },
        verbose=settings.VERBOSE_RECOMPUTE,
    )
    return session.load()


def _ensure_session(application: FastAPI) -> DocumentSession:
    """Create the session lazily on first use"""
    session = getattr(application.state, "session", None)
    if session is None:
        session = create_session()
        application.state.session = session
    return session


def get_session(request: Request) -> DocumentSession:
    """FastAPI dependency returning the app-owned session"""
    return _ensure_session(request.app)


@app.on_event("startup")
async def startup_event():
    """Load the session on startup so a broken store is reported early"""
    session = _ensure_session(app)
    if session.degraded or not session.persistent:
        logger.warning("Session is not persisted; changes will be lost on restart")
    else:
        logger.info("Session ready (revision %d)", session.revision)


@app.on_event("shutdown")
async def shutdown_event():
    """Flush pending persistence writes and stop the write worker"""
    session = getattr(app.state, "session", None)
    if session is None:
        return
    try:
        await session.close()
        logger.info("Pending session writes flushed")
    except Exception as e:
        logger.error(f"Error flushing session writes: {e}")
