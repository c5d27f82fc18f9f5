from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import uvicorn

from app.core.config import settings
from app.core.exceptions import APIException
from app.core.logging_config import setup_logging
from app.api.auth_routes import router as auth_router
from app.api.profile_routes import router as profile_router
from app.api.interest_routes import router as interest_router
from app.api.payment_routes import router as payment_router
from app.api.report_routes import router as report_router
from app.api.message_routes import router as message_router
from app.middleware.frontend_headers import FrontendHeadersMiddleware
from app.database import init_database, close_database, create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.LOG_DIR)
    logger.info("Starting KannadaMatch Backend...")

    try:
        await init_database()
        await create_tables()
        logger.info("Database ready")
    except Exception as e:
        logger.critical(f"Database initialization failed: {e}")
        raise SystemExit(f"Database initialization failed: {e}")

    yield

    # Shutdown
    logger.info("Shutting down KannadaMatch Backend...")
    await close_database()


app = FastAPI(
    title="KannadaMatch Backend",
    description="Matrimony matching API: OTP signup, profiles, interests, subscriptions and reports",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(status_code=exc.status_code, content=exc.to_content(), headers=exc.headers)


def _field_path(loc) -> str:
    """Dotted field path without the request part; a missing body reports the part itself"""
    return ".".join(str(part) for part in loc[1:]) or str(loc[-1])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(f"Validation error on {request.url.path}: {errors}")

    missing_fields = [
        _field_path(error["loc"])
        for error in errors
        if error.get("type") == "missing"
    ]
    content = {
        "success": False,
        "error": "Validation Error",
        "code": "validation_error",
        "details": [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
        ]
    }
    if missing_fields:
        content["missingFields"] = missing_fields
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "code": "internal_error"}
    )


def get_allowed_origins():
    return [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"]
)

# Add custom middleware for frontend integration
app.add_middleware(FrontendHeadersMiddleware)

app.include_router(auth_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(interest_router, prefix="/api")
app.include_router(payment_router, prefix="/api")
app.include_router(report_router, prefix="/api")
app.include_router(message_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "KannadaMatch Backend API", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG
    )
