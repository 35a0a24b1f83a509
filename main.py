"""
Wedding RSVP & Address Service - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from wedding_rsvp.core.config import settings
from wedding_rsvp.core.db import engine, Base
from wedding_rsvp.api import routes_admin, routes_guest, routes_public, routes_webhooks
from wedding_rsvp.services.exceptions import PersistenceError, ServiceError
from wedding_rsvp.utils.responses import error_response, service_error_response

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not settings.USE_FIREBASE:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Wedding RSVP Service",
    description="Guest lookup, RSVP collection and mailing address collection",
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

@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError):
    if isinstance(exc, PersistenceError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.__cause__)
    return service_error_response(exc)

@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(
        message="Invalid request",
        error_code="validation_error",
        details=errors,
        status_code=400
    )

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_guest.router, tags=["guest"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(routes_webhooks.router, prefix="/webhooks", tags=["webhooks"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
