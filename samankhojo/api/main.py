import logging
import sys
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from samankhojo.adapters.jobs.festival_expiry import FestivalExpiryScheduler
from samankhojo.adapters.sqlite.migrator import SQLiteMigrator
from samankhojo.api.deps import get_settings
from samankhojo.app_shell.config import validate_startup
from samankhojo.app_shell.context import build_festival_service
from samankhojo.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules, validate and migrate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_startup(rules, settings.data_dir, settings.migrations_dir)
        SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        print(f"CRITICAL: Startup failed: {e}", file=sys.stderr)
        sys.exit(1)

    scheduler: FestivalExpiryScheduler | None = None
    if rules.festivals.expiry_job_enabled:
        scheduler = FestivalExpiryScheduler(
            build_festival_service(settings.db_path, str(settings.assets_dir), rules),
            poll_interval_seconds=rules.festivals.expiry_poll_seconds,
        )
        scheduler.start()

    yield

    if scheduler is not None:
        scheduler.stop()


app = FastAPI(
    title="SamanKhojo API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from samankhojo.api.routes import (  # noqa: E402
    analytics,
    assets,
    auth,
    bag,
    banners,
    bookings,
    categories,
    feedback,
    festivals,
    inventory,
    items,
    ratings,
    search,
    shops,
    trending,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(shops.router, prefix="/api/shops", tags=["Shops"])
app.include_router(items.router, prefix="/api", tags=["Items"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])
app.include_router(bag.router, prefix="/api/bag", tags=["Bag"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(ratings.router, prefix="/api", tags=["Ratings"])
app.include_router(feedback.router, prefix="/api/feedback", tags=["Feedback"])
app.include_router(festivals.router, prefix="/api/festivals", tags=["Festivals"])
app.include_router(assets.router, prefix="/api/assets", tags=["Assets"])
app.include_router(banners.router, prefix="/api/banners", tags=["Banners"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(trending.router, prefix="/api/trending", tags=["Trending"])
app.include_router(analytics.router, prefix="/api/admin/analytics", tags=["Admin Analytics"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every response with X-Request-ID and log the request."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    start = time.monotonic()
    response = await call_next(request)
    elapsed_ms = (time.monotonic() - start) * 1000

    response.headers["X-Request-ID"] = request_id
    logger.info(
        "%s %s -> %d (%.1fms) [%s]",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        request_id,
    )
    return response


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "samankhojo-api"}
