from fastapi import FastAPI

from mindwork.core.config import Settings

from . import ai, auth, dashboard, health, self_assessments, users, wellness_events


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    for module in (auth, users, self_assessments, wellness_events, dashboard, ai):
        app.include_router(module.router, prefix=settings.api_prefix)
