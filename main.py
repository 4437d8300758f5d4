"""
Orchestrate - Event Management FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.api import (
    routes_public,
    routes_auth,
    routes_employees,
    routes_events,
    routes_tasks,
    routes_admin,
    routes_payment,
    ws,
)
from app.utils.responses import error_response

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Orchestrate",
    description="Event management backend: events, RSVPs, tasks, comments and reports",
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

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the standard envelope"""
    return error_response(
        message=str(exc.detail),
        status_code=exc.status_code
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400"""
    return error_response(
        message="Validation failed",
        details=exc.errors(),
        status_code=400
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected faults without leaking them to the client"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(
        message="Internal server error",
        status_code=500
    )

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(routes_employees.router, prefix="/api/employees", tags=["employees"])
app.include_router(routes_events.router, prefix="/api/events", tags=["events"])
app.include_router(routes_tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(routes_admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(routes_payment.router, prefix="/api/payment", tags=["payment"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

# Development server; deploy behind uvicorn workers with DATABASE_URL and
# JWT_SECRET set in the environment.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
