# parking_api/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, domain/global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from parking_api.routers import enforcement, health, permits, shifts, sync, tenants
from parking_api.database import SessionLocal, create_tables, seed_permit_types
from parking_api.config import settings
from parking_api.errors import ParkingError
from parking_api.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parking Permit & Enforcement API",
    description="Resident permits, real-time plate authorization, field enforcement and offline sync.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (tenant portal + officer devices) ──────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(health.router,      prefix="/api", tags=["💚 Health"])
app.include_router(tenants.router,     prefix="/api", tags=["🏠 Tenants & Vehicles"])
app.include_router(permits.router,     prefix="/api", tags=["🪪 Permits"])
app.include_router(enforcement.router, prefix="/api", tags=["🚨 Enforcement"])
app.include_router(shifts.router,      prefix="/api", tags=["🕘 Shifts"])
app.include_router(sync.router,        prefix="/api", tags=["📶 Offline Sync"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parking API starting up...")
    create_tables()
    db = SessionLocal()
    try:
        seed_permit_types(db)
    finally:
        db.close()
    logger.info("✅ Database tables ready, permit catalog seeded")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parking API shutting down...")
