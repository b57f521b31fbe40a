"""
Blog Service - user accounts and posts behind a JWT-protected JSON API
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from .auth import TokenService
from .config import Settings, settings as default_settings
from .db import init_db
from .errors import AuthError
from .middleware import BodyLimitMiddleware, PayloadTooLargeError
from .routes import health, posts, users
from .utils.responses import error_message, failure_response

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize database on startup"""
    init_db()
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration to run with; the environment-derived
            global settings when omitted

    Returns:
        FastAPI app with public routes, the authentication boundary and
        protected routes mounted under ``settings.API_PREFIX``
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Blog Service",
        description="User accounts and blog posts",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodyLimitMiddleware, max_body_bytes=settings.BODY_LIMIT_BYTES)

    @app.middleware("http")
    async def secure_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    @app.exception_handler(PayloadTooLargeError)
    async def payload_too_large_handler(_request: Request, exc: PayloadTooLargeError):
        return failure_response(exc.detail, exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # Errors raised outside a handler's own try, e.g. in a dependency
        logger.error(
            "Unhandled error on %s %s : %s",
            request.method, request.url.path, exc, exc_info=exc
        )
        return failure_response(error_message(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(AuthError)
    async def auth_error_handler(_request: Request, exc: AuthError):
        # Only the identity dependency lets AuthError escape; handlers
        # answer their own errors
        return failure_response(error_message(exc), status.HTTP_403_FORBIDDEN)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return failure_response(f"ValidationError : {details}", status.HTTP_400_BAD_REQUEST)

    # Public routes first, then everything behind the authentication boundary
    app.include_router(users.router, prefix=settings.API_PREFIX)
    app.include_router(posts.router, prefix=settings.API_PREFIX)
    app.include_router(users.protected_router, prefix=settings.API_PREFIX)
    app.include_router(posts.protected_router, prefix=settings.API_PREFIX)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``blog-service`` console script)."""
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
