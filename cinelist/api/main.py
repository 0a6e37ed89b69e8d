"""
FastAPI application entry point for the CineList API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinelist.api.config import get_api_host, get_api_port, get_log_level
from cinelist.api.routers import movies, watchlist, ratings, system
from cinelist.errors import (
    CineListError, NotFoundError, ReferentialError, StorageError,
    TransientProviderError, ValidationError
)
from cinelist.utils.logging_config import configure_api_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ReferentialError: 404,
    TransientProviderError: 502,
    StorageError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging once the server starts."""
    configure_api_logging(level=get_log_level())
    yield


app = FastAPI(
    lifespan=lifespan,
    title="CineList API",
    description="Movie catalog backed by OMDb, per-user ranked watchlists and ratings",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(movies.router)
app.include_router(watchlist.router)
app.include_router(ratings.router)
app.include_router(system.router)


@app.exception_handler(CineListError)
async def handle_domain_error(request: Request, exc: CineListError):
    """Translate domain errors into JSON responses."""
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "CineList API",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cinelist.api.main:app", host=get_api_host(), port=get_api_port())
