import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from comicscript.config import settings
from comicscript.database import init_db
from comicscript.logging import log_config

# API Routes
from comicscript.api import series, issues, pages, panels, characters, editor

logger = log_config.setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Silence Uvicorn's default access logger to reduce noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Storage has to be usable before we accept edits, so failures here are fatal
    init_db()

    worker_pid = os.getpid()
    logger.info(f"Worker process PID:{worker_pid} startup (Log Level: {settings.log_level})")

    yield

    logger.info(f"Worker {worker_pid} shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    lifespan=lifespan,
    root_path=settings.clean_base_url,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


# --- ROUTER REGISTRATION ---
app.include_router(series.router, prefix="/api/series", tags=["series"])
app.include_router(issues.router, prefix="/api/issues", tags=["issues"])
app.include_router(pages.router, prefix="/api/pages", tags=["pages"])
app.include_router(panels.router, prefix="/api/panels", tags=["panels"])
app.include_router(characters.router, prefix="/api/characters", tags=["characters"])
app.include_router(editor.router, prefix="/api/editor", tags=["editor"])


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "comicscript"}
