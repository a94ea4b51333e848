"""
Application factory.

Wires the components into a FastAPI app:
1. Lifespan connects the store (and seeds the demo family when enabled)
2. Middleware binds a correlation id for every request
3. Routers are mounted under the configured API prefix
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from aetherius import __version__
from aetherius.api.errors import register_exception_handlers
from aetherius.api.routes import ROUTERS
from aetherius.audit import bind_correlation_id, configure_logging, create_correlation_id
from aetherius.config import validate_all_settings
from aetherius.orchestrator import AppComponents, create_app_components
from aetherius.services import DEMO_FAMILY_ID, seed_demo_data


logger = structlog.get_logger("aetherius.api")

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Build the API.

    Args:
        components: Pre-built components (tests pass their own store and
                    a fake text generator). Built from settings if omitted.
    """
    components = components or create_app_components()
    settings = components.settings.app

    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ----------------------------------------
        # STARTUP: connect the store
        # ----------------------------------------
        checks = validate_all_settings(components.settings)
        if not checks.get("gemini_api_key_present"):
            logger.warning("gemini_api_key_missing", detail="AI routes will fail until GEMINI_API_KEY is set")

        store = components.store
        await store.connect()
        await components.audit.log_store_connected(store.backend_name)

        if settings.seed_demo_data and await seed_demo_data(store):
            await components.audit.log_demo_data_seeded(DEMO_FAMILY_ID)

        yield

        # ----------------------------------------
        # SHUTDOWN
        # ----------------------------------------
        await store.close()

    app = FastAPI(
        title="Aetherius Family Finance API",
        description="Family budgets, goals, smart alerts and AI financial guidance.",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug_mode,
    )
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or create_correlation_id()
        bind_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    register_exception_handlers(app)

    @app.get(f"{settings.api_prefix}/health", tags=["Health"])
    async def health():
        return {
            "status": "ok",
            "backend": components.store.backend_name,
            "environment": settings.app_environment,
        }

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    return app
