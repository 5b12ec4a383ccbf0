"""
FastAPI entrypoint for TripSplit backend application.
"""
from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from tripsplit.api.router import api_router
from tripsplit.core.config import settings
from tripsplit.core.exceptions import NotFoundError, TripSettledError, ValidationError
from tripsplit.core.logging import configure_logging
from tripsplit.db.session import init_db

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(
    title="TripSplit API",
    description="Shared trip expenses and settlement calculation",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(TripSettledError)
async def trip_settled_handler(request: Request, exc: TripSettledError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


def mount_static(app: FastAPI, directory: str) -> bool:
    """Serve the front-end bundle at /static if the directory exists."""
    if not os.path.isdir(directory):
        return False
    app.mount("/static", StaticFiles(directory=directory, html=True), name="static")
    return True


mount_static(app, settings.STATIC_DIR)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "TripSplit API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
