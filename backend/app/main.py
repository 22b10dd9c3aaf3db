import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import responses
from app.core.clock import isoformat_utc, utcnow
from app.core.config import settings
from app.core.database import Database
from app.core.errors import AppError, ErrorCode
from app.api import auth, employees, attendance, reports

logger = logging.getLogger(__name__)

STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
}


def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def init_database(db: Database):
    """Create tables and seed the default admin user on an empty hr_users table."""
    from app.models.user import HRUser
    from app.core.security import get_password_hash

    logger.info("Creating database tables...")
    db.create_all()
    logger.info("Tables created successfully")

    if not settings.SEED_DEFAULT_ADMIN or settings.is_production:
        return

    session = db.session()
    try:
        if session.query(HRUser).first() is None:
            session.add(HRUser(
                email="admin@hrmanagement.com",
                password_hash=get_password_hash("password123"),
                name="System Administrator",
            ))
            session.commit()
            logger.info("Default admin user created (admin@hrmanagement.com)")
    except Exception as e:
        logger.error(f"Error seeding admin user: {e}")
        session.rollback()
    finally:
        session.close()


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.is_operational:
            logger.info(
                "Operational error: %s (%s %s) %s %s",
                exc.message, exc.status_code, exc.error_code, request.method, request.url.path,
            )
        else:
            logger.error("Programming error: %s (%s %s)", exc.message, request.method, request.url.path)
        return responses.error(exc.message, exc.status_code, exc.error_code, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return responses.error(
            "Validation failed",
            422,
            ErrorCode.VALIDATION_ERROR,
            {"errors": _field_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return responses.error(message, exc.status_code, STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR))

    # Global exception handler - always return JSON (never plain text)
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unexpected error on %s %s: %s\n%s",
            request.method, request.url.path, exc, traceback.format_exc(),
        )
        if settings.is_production:
            return responses.error("An unexpected error occurred", 500, ErrorCode.INTERNAL_ERROR)
        return responses.error(
            str(exc) or type(exc).__name__,
            500,
            ErrorCode.INTERNAL_ERROR,
            {"stack": traceback.format_exception(type(exc), exc, exc.__traceback__)},
        )


def create_app(database: Optional[Database] = None) -> FastAPI:
    configure_logging()
    db = database or Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_database(app.state.db)
        yield
        app.state.db.dispose()

    # Disable API docs in production
    docs_url = "/docs" if not settings.is_production else None
    redoc_url = "/redoc" if not settings.is_production else None

    app = FastAPI(
        title=settings.APP_NAME,
        description="HR Management - employees, attendance and reports API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
    )
    app.state.db = db

    register_exception_handlers(app)

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    prefix = settings.API_V1_PREFIX

    @app.get(f"{prefix}/health")
    def health_check():
        try:
            database_status = "connected" if app.state.db.ping() else "unavailable"
        except Exception as e:
            logger.warning(f"Health check database ping failed: {e}")
            database_status = "unavailable"
        return responses.success("Server is running", {
            "status": "OK",
            "timestamp": isoformat_utc(utcnow()),
            "environment": settings.ENVIRONMENT,
            "database": database_status,
        })

    @app.get("/")
    def root():
        return {"message": settings.APP_NAME, "version": "1.0.0", "docs": docs_url}

    # Include routers
    app.include_router(auth.router, prefix=prefix)
    app.include_router(employees.router, prefix=prefix)
    app.include_router(attendance.router, prefix=prefix)
    app.include_router(reports.router, prefix=prefix)

    # Employee photos
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    return app


app = create_app()
