"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import Session

from wellpulse.api.deps import get_db
from wellpulse.api.v1.router import api_router
from wellpulse.core.config import settings
from wellpulse.core.errors import WellPulseError
from wellpulse.core.logging_config import get_logger, setup_logging
from wellpulse.core.rate_limit import limiter
from wellpulse.db.session import SessionLocal
from wellpulse.middleware import LoggingMiddleware
from wellpulse.services.notifications import NotificationQueue, build_notifier
from wellpulse.services.weekly_dispatch import WeeklyReportScheduler

setup_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the email workers and the weekly report job; stop them on shutdown."""
    notification_config = settings.notification_config()
    dispatch_config = settings.dispatch_config()

    notifier = build_notifier(notification_config)
    notifications = NotificationQueue(
        notifier,
        max_depth=notification_config.queue_max_depth,
        worker_count=notification_config.worker_count,
    )
    notifications.initialize()
    await notifications.start_workers()

    scheduler = WeeklyReportScheduler(SessionLocal, notifier, dispatch_config)
    if dispatch_config.enabled:
        scheduler.start()
    else:
        logger.info("weekly_dispatch_scheduler_disabled")

    app.state.notifier = notifier
    app.state.notifications = notifications
    app.state.scheduler = scheduler

    logger.info(
        "application_started",
        app_title=settings.APP_TITLE,
        app_version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )
    try:
        yield
    finally:
        scheduler.shutdown()
        await notifications.stop_workers()
        logger.info("application_stopped")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(WellPulseError)
async def wellpulse_error_handler(request: Request, exc: WellPulseError):
    if exc.status_code >= 500:
        logger.error("request_error", code=exc.code, detail=exc.message)
    else:
        logger.info("request_rejected", code=exc.code, status_code=exc.status_code, field=exc.field)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    detail = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"detail": detail, "code": "validation_error", "errors": errors},
    )


# Logging middleware first so every request gets a request id
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Liveness plus dependency status.

    Returns 503 if the database is unreachable.
    """
    notifications = getattr(request.app.state, "notifications", None)
    scheduler = getattr(request.app.state, "scheduler", None)

    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": {"status": "connected"},
        "notifications": {
            "queued": notifications.queue.qsize() if notifications and notifications.queue else 0,
            "workers": len(notifications.workers) if notifications else 0,
        },
        "weekly_dispatch": {"running": bool(scheduler and scheduler.running)},
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
