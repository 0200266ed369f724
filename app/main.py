# app/main.py
from fastapi import FastAPI

from app.api.routes import admin, health, meetings
from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Team Calendar service.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service for a small team calendar: recurring meetings with\n"
            "notes and conferencing links, generated from a two-slot weekly\n"
            "schedule since 2019 with Irish public holidays skipped."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(meetings.router)
    app.include_router(admin.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
