"""
FastAPI app entrypoint.

Serves the court/notification/ownership API and runs the court notify job every minute
in a background scheduler.
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from vacantcourt.api.routes import courts, notifications, ownership
from vacantcourt.config import Settings, missing_notify_settings, settings
from vacantcourt.core.constants import COURT_NOTIFY_JOB_ID
from vacantcourt.core.errors import RequestError, StoreError, error_response
from vacantcourt.scheduler.court_notify_job import build_court_notify_context, run_court_notify_job
from vacantcourt.services.auth import TokenVerifier

logger = logging.getLogger(__name__)

_DEV_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
]


def _run_job_tick(ctx) -> None:
    result = run_court_notify_job(ctx)
    logger.info("Court notify tick: %s %s", result.status_code, result.body)


def create_app(s: Settings | None = None, session_factory: Callable[[], Session] | None = None) -> FastAPI:
    """
    Build the app with its store/dispatcher/verifier handles. Handles are created once here
    and shared by routes (app.state) and the scheduled job.
    """
    s = s or settings
    ctx = build_court_notify_context(s, session_factory)
    scheduler = BackgroundScheduler()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if s.notify_job_enabled:
            missing = missing_notify_settings(s)
            if missing:
                logger.error("Court notify job will fail until these are set: %s", ", ".join(missing))
            scheduler.add_job(
                _run_job_tick,
                "interval",
                seconds=s.notify_interval_seconds,
                id=COURT_NOTIFY_JOB_ID,
                args=[ctx],
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            scheduler.start()
            logger.info("Court notify job scheduled every %ss", s.notify_interval_seconds)
        yield
        if scheduler.running:
            scheduler.shutdown(wait=False)

    app = FastAPI(title="VacantCourt", version="0.1.0", lifespan=lifespan)
    app.state.settings = s
    app.state.store = ctx.store
    app.state.verifier = TokenVerifier.from_settings(s)
    app.state.scheduler = scheduler

    cors_origins = list(_DEV_CORS_ORIGINS)
    if s.site_base_url:
        cors_origins.append(s.site_base_url.rstrip("/"))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestError)
    async def request_error_handler(request: Request, exc: RequestError):
        return error_response(exc)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
        return error_response(exc)

    app.include_router(courts.router, tags=["courts"])
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(ownership.router, tags=["ownership"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "scheduler_running": scheduler.running}

    return app


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
app = create_app()
