import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth import AdminSessionIssuer
from .config import Settings, get_settings
from .db import create_db_engine, create_session_factory, init_db
from .errors import AdminAPIError, ValidationError
from .routers import admin_router
from .services.admin import AdminService
from .store import ChatStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as `{success: false, message}`."""

    @app.exception_handler(AdminAPIError)
    async def admin_error_handler(request: Request, exc: AdminAPIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = ValidationError("Invalid request body")
        return _error_response(error.status_code, error.message)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API with its store, admin service and session issuer."""
    if settings is None:
        settings = get_settings()

    engine = create_db_engine(settings.database_url)
    if settings.create_tables:
        init_db(engine)

    app = FastAPI(
        title="Chattu Admin API",
        description="Read-only admin reporting over Chattu users, chats and messages",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_issuer = AdminSessionIssuer(settings)
    app.state.admin_service = AdminService(
        ChatStore(create_session_factory(engine)),
        max_concurrency=settings.admin_max_concurrency,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(admin_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("chattu_admin.main:app", host=settings.api_host, port=settings.api_port)
