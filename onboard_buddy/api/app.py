"""FastAPI server for Onboard Buddy"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from onboard_buddy.api.routes.billing import router as billing_router
from onboard_buddy.api.routes.employees import router as employees_router
from onboard_buddy.api.routes.export import router as export_router
from onboard_buddy.api.routes.gallery import router as gallery_router
from onboard_buddy.api.routes.health import router as health_router
from onboard_buddy.api.routes.missions import router as missions_router
from onboard_buddy.api.routes.notifications import router as notifications_router
from onboard_buddy.api.routes.tags import router as tags_router
from onboard_buddy.api.routes.tasks import router as tasks_router
from onboard_buddy.config import (
    API_HOST,
    API_PORT,
    APP_VERSION,
    DUE_DATE_SWEEP_SECONDS,
    WEBHOOK_SECRET,
    is_development,
)
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter, log_event
from onboard_buddy.utils.error_sanitizer import get_safe_error_detail
from onboard_buddy.workspace import Workspace

logger = get_logger(__name__)

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]


async def _due_date_sweep(workspace: Workspace, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            created = workspace.check_due_dates()
        except Exception as e:
            logger.error("Due-date sweep failed: %s", e)
            counter("notifications.sweep_failed")
            continue
        if created:
            logger.info("Due-date sweep created %d notifications", created)


def create_app(
    workspace: Workspace | None = None,
    sweep_interval: float = DUE_DATE_SWEEP_SECONDS,
    webhook_secret: str = WEBHOOK_SECRET,
) -> FastAPI:
    """
    Build the API around ``workspace`` (default: configured from the environment).

    Args:
        workspace: Stores to serve; tests pass an in-memory one
        sweep_interval: Seconds between due-date sweeps; <= 0 disables the sweep
        webhook_secret: Signing secret for the payment webhook
    """
    workspace = workspace or Workspace.from_config()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweep = (
            asyncio.create_task(_due_date_sweep(workspace, sweep_interval))
            if sweep_interval > 0
            else None
        )
        log_event("api.startup", service="onboard-buddy", version=APP_VERSION)
        try:
            yield
        finally:
            if sweep is not None:
                sweep.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sweep
            workspace.cleanup.drain(timeout=5)

    app = FastAPI(title="Onboard Buddy API", version=APP_VERSION, lifespan=lifespan)
    app.state.workspace = workspace
    app.state.webhook_secret = webhook_secret

    # Custom validation error handler to prevent information leakage
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        counter("api.validation_errors")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Invalid request format. Please check your request and try again.",
                "error_count": len(exc.errors()),
                "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        counter("api.unhandled_errors")
        detail = get_safe_error_detail(exc, 500)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": detail})

    if is_development():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=DEV_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Performed-By"],
        )

    app.include_router(health_router)
    app.include_router(missions_router)
    app.include_router(gallery_router)
    app.include_router(tags_router)
    app.include_router(tasks_router)
    app.include_router(notifications_router)
    app.include_router(employees_router)
    app.include_router(billing_router)
    app.include_router(export_router)

    @app.get("/")
    def root() -> dict[str, Any]:
        return {
            "service": "Onboard Buddy API",
            "version": APP_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "missions": "/api/missions",
                "gallery": "/api/gallery",
                "tags": "/api/tags",
                "tasks": "/api/tasks",
                "notifications": "/api/notifications",
                "employees": "/api/employees",
                "billing": "/api/billing",
                "export": "/api/export",
            },
        }

    return app


def main() -> None:
    import uvicorn

    uvicorn.run(create_app(), host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
