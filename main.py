"""
DevEvent Hub - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import db_manager
from app.core.errors import StorageError, register_exception_handlers
from app.api import routes_admin, routes_bookings, routes_public

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    try:
        db_manager.create_all()
        logger.info("Database tables created")
    except StorageError:
        # reads degrade to empty results until the store comes back
        logger.exception("Database unavailable at startup")
    yield
    db_manager.dispose()
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="DevEvent Hub",
    description="Developer event listings and bookings",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_bookings.router, prefix="/api", tags=["bookings"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
