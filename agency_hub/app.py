"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from agency_hub.config import REPORT_CRON_DAY, REPORT_CRON_HOUR, SCHEDULER_ENABLED
from agency_hub.routers import admin, ai, chat, contact, dashboard, white_label
from agency_hub.services.chatbot import ChatResponder, create_openai_client
from agency_hub.services.reports import ReportService, build_report_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    scheduler = None
    if SCHEDULER_ENABLED:
        try:
            from agency_hub.scheduler import create_scheduler
            scheduler = create_scheduler(app.state.report_service)
            scheduler.start()
            logger.info("Scheduler started — monthly reports on day %d at %02d:00",
                        REPORT_CRON_DAY, REPORT_CRON_HOUR)
        except Exception as e:
            logger.warning("Scheduler failed to start: %s", e)
            scheduler = None

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)


def create_app(report_service: ReportService | None = None,
               chat_responder: ChatResponder | None = None,
               openai_client=None) -> FastAPI:
    """Build the app. Collaborators default to the configured real services."""
    app = FastAPI(
        title="Top Web Directories API",
        description="Agency backend: chatbot, contact form, client reports, white-label.",
        version="1.0.0",
        lifespan=lifespan,
    )

    if openai_client is None:
        openai_client = create_openai_client()
    app.state.openai_client = openai_client
    app.state.chat_responder = chat_responder or ChatResponder(openai_client)
    app.state.report_service = report_service or build_report_service()

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    for r in [chat, contact, ai, dashboard, admin, white_label]:
        app.include_router(r.router)

    return app
