"""
Physiqube Running API entry point.

Builds the FastAPI app: logging, middleware, error rendering, liveness
endpoints and the /v1 routers. It also owns the process-wide EventBus
(app.state.event_bus) that the routers hand to the services.
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from routers import onboarding, profile, metrics
from core.config import settings
from core.database import check_db_connection
from core.events import EventBus, EVENT_PROFILE_CREATED, EVENT_HEART_RATE_ZONES_CALCULATED
from core.logging import setup_logging
from core.exceptions import APIException
from core.security_headers import SecurityHeadersMiddleware
import logging
import time

setup_logging()
logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # vite dev server
    "http://127.0.0.1:5173",
]

app = FastAPI(
    title="Physiqube Running API",
    description="Physical profile onboarding, heart rate zones and body metrics history",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


# --- Event subscribers ---

def _log_event(event_name: str):
    def handler(user_id: str, **payload):
        logger.info(
            f"{event_name} for user {user_id}",
            extra={"extra_fields": {"event": event_name, "user_id": user_id, **payload}},
        )
    return handler


def build_event_bus() -> EventBus:
    bus = EventBus()
    for event_name in (EVENT_PROFILE_CREATED, EVENT_HEART_RATE_ZONES_CALCULATED):
        bus.subscribe(event_name, _log_event(event_name))
    return bus


app.state.event_bus = build_event_bus()


# --- Middleware ---

if settings.DEBUG:
    allowed_origins = ["*"]
else:
    allowed_origins = settings.cors_origins or DEV_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(SecurityHeadersMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One log line per request with status and timing."""
    started = time.perf_counter()
    fields = {"method": request.method, "path": request.url.path}
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Request failed: {request.method} {request.url.path}",
            exc_info=True,
            extra={"extra_fields": {**fields, "error": str(e)}},
        )
        raise

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms} ms)",
        extra={"extra_fields": {**fields, "status_code": response.status_code, "process_time_ms": elapsed_ms}},
    )
    response.headers["X-Process-Time-Ms"] = str(elapsed_ms)
    return response


# --- Error rendering ---

@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=True,
        extra={"extra_fields": {"method": request.method, "path": request.url.path}},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error_code": "INTERNAL_ERROR"},
    )


# --- Liveness ---

@app.get("/health")
def health():
    """200 when the database answers, 503 otherwise."""
    if not check_db_connection():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unavailable"},
        )
    return {"status": "healthy", "database": "ok", "timestamp": time.time()}


@app.get("/ping")
def ping():
    """No dependencies checked."""
    return {"pong": True}


app.include_router(onboarding.router)
app.include_router(profile.router)
app.include_router(metrics.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_RELOAD)
