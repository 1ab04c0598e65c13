from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.responses import RedirectResponse
from starlette.requests import Request

from chefbook.core import database
from chefbook.core.config import get_settings
from chefbook.core.errors import register_error_handlers
from chefbook.core.logging import configure_logging
from chefbook.routers import chefs, dishes, health, ingredients


CORE_ROUTERS = (
    (health.router, {"tags": ["health"]}),
    (chefs.router, {}),
    (ingredients.router, {}),
    (dishes.router, {}),
)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Create tables once at startup
    database.init_db()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
        lifespan=lifespan,
    )
    register_error_handlers(application)

    @application.middleware("http")
    async def enforce_utf8_json(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    @application.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    for router, include_kwargs in CORE_ROUTERS:
        application.include_router(router, **include_kwargs)

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    return application


app = create_app()
