"""
InnSync application entry point
Property management backend for small Indonesian hotels
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from innsync.config import settings
from innsync.database import init_db
from innsync.logging_config import setup_logging
from innsync.routers import (
    auth, properties, guests, rooms, reservations, housekeeping, payments, restaurant,
    dashboard, analytics, reports, exports, webhooks, preferences, backup, reference
)
from innsync.utils.errors import classify_error, is_retryable, ERROR_MESSAGES, NETWORK

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    setup_logging(settings.LOG_LEVEL, settings.APP_NAME.lower())
    init_db()

    from innsync.services.event_handlers import register_event_handlers
    register_event_handlers()

    logger.info(f"{settings.APP_NAME} started")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title="InnSync - Property Management System",
    description="Reservations, rooms, housekeeping, payments and restaurant for small hotels",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    kind = classify_error(exc)
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=503 if kind == NETWORK else 500,
        content={"error_type": kind, "message": ERROR_MESSAGES[kind], "retryable": is_retryable(kind)},
    )


app.include_router(auth.router)
app.include_router(properties.router)
app.include_router(guests.router)
app.include_router(rooms.router)
app.include_router(reservations.router)
app.include_router(housekeeping.router)
app.include_router(payments.router)
app.include_router(restaurant.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(reports.router)
app.include_router(exports.router)
app.include_router(webhooks.router)
app.include_router(preferences.router)
app.include_router(backup.router)
app.include_router(reference.router)


@app.get("/")
def root():
    return {"name": settings.APP_NAME, "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("innsync.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
