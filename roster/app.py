import os
import time

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from roster.core.config import Settings, get_settings
from roster.core.logging_config import (
    generate_request_id,
    get_logger,
    log_with_context,
    request_id_var,
    setup_logging,
)
from roster.routers import students as students_router
from roster.services.roster_service import RosterStore, open_roster

BASE = os.path.dirname(__file__)
TEMPLATES_DIR = os.path.join(BASE, "templates")

logger = get_logger("http")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "form-action 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with a UUID, log start/finish and echo it in X-Request-ID."""

    async def dispatch(self, request, call_next):
        req_id = generate_request_id()
        token = request_id_var.set(req_id)
        start_time = time.time()
        try:
            log_with_context(
                logger,
                "INFO",
                f"Request started: {request.method} {request.url.path}",
                extra_data={"query_params": dict(request.query_params)},
            )
            response = await call_next(request)
            duration_ms = (time.time() - start_time) * 1000
            response.headers["X-Request-ID"] = req_id
            log_with_context(
                logger,
                "INFO",
                f"Request completed: {request.method} {request.url.path} -> {response.status_code}",
                extra_data={"duration_ms": round(duration_ms, 2), "status_code": response.status_code},
            )
            return response
        finally:
            request_id_var.reset(token)


def create_app(settings: Settings | None = None, store: RosterStore | None = None) -> FastAPI:
    """Build the app with one RosterStore owned by app.state."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Student Roster")
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)
    app.state.roster = store if store is not None else open_roster(settings)

    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_middleware(RequestIdMiddleware)

    @app.get("/health")
    def health(request: Request):
        return {"status": "healthy", "records": len(request.app.state.roster)}

    app.include_router(students_router.router)
    return app
