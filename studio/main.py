"""
Industry Studio API — entry point.

Startup sequence:
  1. Configure OTel tracing (→ Jaeger via OTLP)
  2. Create tables if not present
  3. Connect to Redis (feed view cache), if enabled
  4. Initialise MinIO client & bucket, if media storage is enabled
  5. Start the content generation HTTP client
  6. Expose Prometheus /metrics endpoint
"""
import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from studio.config import settings
from studio.database import init_db
from studio.errors import MutationError, UnauthorizedError
from studio.telemetry import setup_tracing, instrument_app
from studio.clients.generation_client import generation_client
from studio.clients.minio_client import init_minio
from studio.clients.redis_client import close_redis, init_redis
from studio.routers import feed, generate, posts, users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Set up tracing before the app is created so all imports are instrumented
setup_tracing()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup and shutdown of all external connections."""
    logger.info("Starting Industry Studio API (env=%s)", settings.environment)

    await init_db()
    if settings.redis_enabled:
        try:
            await init_redis()
        except Exception as exc:
            logger.warning("Redis unavailable (%s) — feed cache disabled", exc)
            await close_redis()
    if settings.media_storage_enabled:
        init_minio()                # sync — boto3 is not async
    await generation_client.start()

    logger.info("All services connected. API ready.")
    yield

    logger.info("Shutting down...")
    await generation_client.stop()
    await close_redis()


app = FastAPI(
    title="Industry Studio API",
    description=(
        "Image feed with likes and comments, plus industry-specific "
        "AI content generators (education, marketing, architecture, healthcare)."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})


@app.exception_handler(MutationError)
async def mutation_error_handler(request: Request, exc: MutationError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(exc)},
    )


# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])
app.include_router(feed.router, prefix="/feed", tags=["Feed"])
app.include_router(generate.router, prefix="/generate", tags=["Generation"])

# ── Prometheus metrics endpoint ────────────────────────────────────────────
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── OTel FastAPI instrumentation ──────────────────────────────────────────
instrument_app(app)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "service": settings.service_name}
