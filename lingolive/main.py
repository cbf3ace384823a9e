"""FastAPI application entrypoint.

HTTP routes live under /api, the realtime socket at /ws, and status at
/ and /health. Auto-generated OpenAPI docs at /docs.

The session store, agent registry, connection hub, translation resolver and
connection router are created once during the lifespan and stored on
app.state for injection via Depends(). Inactive sessions are swept by
APScheduler on a fixed interval.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lingolive import __version__
from lingolive.api.auth import router as auth_router
from lingolive.api.health import router as health_router
from lingolive.api.locales import router as locales_router
from lingolive.api.realtime import router as realtime_router
from lingolive.core.config import Settings, settings, validate_settings
from lingolive.core.exceptions import LingoLiveError
from lingolive.realtime.agents import AgentRegistry
from lingolive.realtime.hub import ConnectionHub
from lingolive.realtime.router import ConnectionRouter
from lingolive.services.cleanup import SessionSweeper
from lingolive.services.language.normalizer import safe_language_code
from lingolive.services.translation.cache import TranslationCache
from lingolive.services.translation.providers.base import TranslationProvider
from lingolive.services.translation.providers.fallback import FallbackTranslationProvider
from lingolive.services.translation.providers.google_web import GoogleWebProvider
from lingolive.services.translation.providers.libretranslate import LibreTranslateProvider
from lingolive.services.translation.resolver import TranslationResolver, default_strategies
from lingolive.store.sessions import SessionStore


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


def _build_translation_provider(config: Settings) -> TranslationProvider | None:
    """Google web (primary) with LibreTranslate fallback, or whichever is enabled."""
    if not config.external_translation_enabled:
        return None

    libretranslate = LibreTranslateProvider(
        url=config.libretranslate_url,
        api_key=config.libretranslate_api_key,
    )
    if not config.google_web_translate_enabled:
        return libretranslate
    return FallbackTranslationProvider(
        primary=GoogleWebProvider(),
        secondary=libretranslate,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle.

    Builds the service graph and attaches it to app.state. Retrieved in
    route handlers via Depends() in lingolive/api/deps.py.
    Also starts the APScheduler sweep of inactive sessions.
    """
    # --- Startup ---
    validate_settings(settings)
    logger.info("app_startup", env=settings.app_env, site_keys=len(settings.site_keys))

    agent_language = safe_language_code(settings.agent_language)
    store = SessionStore(default_language=agent_language)
    agents = AgentRegistry()
    hub = ConnectionHub()

    provider = _build_translation_provider(settings)
    resolver = TranslationResolver(
        default_strategies(provider, timeout_seconds=settings.translation_timeout_seconds),
        cache=TranslationCache(max_size=settings.translation_cache_size),
        agent_language=agent_language,
    )

    app.state.session_store = store
    app.state.agent_registry = agents
    app.state.connection_hub = hub
    app.state.translation_provider = provider
    app.state.translation_resolver = resolver
    app.state.connection_router = ConnectionRouter(
        store=store,
        resolver=resolver,
        hub=hub,
        agents=agents,
    )

    # Sweep inactive sessions; a single instance at a time
    sweeper = SessionSweeper(store, max_age=timedelta(hours=settings.session_max_age_hours))
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sweeper.run,
        "interval",
        minutes=settings.session_sweep_interval_minutes,
        id="session_sweep",
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    app.state.scheduler = scheduler

    logger.info(
        "app_services_ready",
        external_translation=type(provider).__name__ if provider else None,
    )
    yield

    # --- Shutdown ---
    logger.info("app_shutdown", sessions=len(store), agents=len(agents))

    scheduler.shutdown(wait=False)

    if provider is not None:
        await provider.aclose()


app = FastAPI(
    title="LingoLive Support: Realtime Translation Chat API",
    description="Routes support chat between end-user widgets and agents across languages.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(LingoLiveError)
async def lingolive_error_handler(request: Request, exc: LingoLiveError) -> JSONResponse:
    """Structured error response for all LingoLive exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


app.include_router(health_router)
app.include_router(auth_router, prefix="/api")
app.include_router(locales_router, prefix="/api")
app.include_router(realtime_router)
