# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, all routers, and the
background compliance loop.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import vehicles, chauffeurs, employees, trips, notifications, health
from app.database import create_tables, SessionLocal
from app.config import settings
from app.exceptions import FleetError
from app.services import response_simulator
from app.services.compliance_service import start_compliance_loop
from app.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="FleetPro Policy Engine API",
    description="Vehicle assignment ledger, usage policy, trip dispatch and document compliance.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the admin console to call the API) ───────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to console origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(FleetError)
async def fleet_error_handler(request: Request, exc: FleetError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(vehicles.router,      prefix="/api/v1", tags=["Vehicles & Assignment Ledger"])
app.include_router(chauffeurs.router,    prefix="/api/v1", tags=["Chauffeurs"])
app.include_router(employees.router,     prefix="/api/v1", tags=["Employees & Policy"])
app.include_router(trips.router,         prefix="/api/v1", tags=["Trips & Dispatch"])
app.include_router(notifications.router, prefix="/api/v1", tags=["Notifications & Compliance"])
app.include_router(health.router,        prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
_background: list[asyncio.Task] = []


@app.on_event("startup")
async def startup():
    logger.info("FleetPro Policy Engine starting up...")
    create_tables()
    logger.info("Database tables ready")

    if settings.COMPLIANCE_CHECK_ENABLED:
        _background.append(asyncio.create_task(start_compliance_loop(SessionLocal), name="compliance-loop"))
        logger.info(f"Compliance check every {settings.COMPLIANCE_CHECK_INTERVAL_SECONDS}s")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("FleetPro Policy Engine shutting down...")
    for task in _background:
        task.cancel()
    response_simulator.cancel_all()
