"""
EventFeed FastAPI Application

Main entry point for the EventFeed server.
Configures FastAPI with logging, CORS, routes, and database.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import get_settings
from app.database import init_db
from app.api.routes import health, microposts, sessions, users

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure the root logger from LoggingConfig."""
    logging.basicConfig(level=settings.logging.LEVEL, format=settings.logging.FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Handles:
    - Logging and database initialisation on startup
    - Cleanup on shutdown
    """
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    init_db()
    logger.info(f"Server ready on {settings.server.HOST}:{settings.server.PORT}")

    yield

    # Shutdown
    logger.info("Shutting down server...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Social event feed: follow people, post events, see what's coming up",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.server.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(users.router)
app.include_router(sessions.router)
app.include_router(microposts.router)


@app.get("/")
async def root() -> dict:
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API information.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.server.HOST, port=settings.server.PORT)
