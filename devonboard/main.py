import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from devonboard import __version__
from devonboard.api.dependencies import build_services
from devonboard.api.routes import changes, sources, steps, webhook
from devonboard.config import get_settings

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Set log level for app modules
logger = logging.getLogger("devonboard")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Classifier, store and orchestrator are built once per process
    app.state.record_store, app.state.orchestrator = build_services(settings)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Keeps onboarding plans in sync with their documentation",
    version=__version__,
    lifespan=lifespan,
)

# Include routers
app.include_router(webhook.router, prefix="/api/webhook", tags=["Webhooks"])
app.include_router(sources.router, prefix="/api/sources", tags=["Sources"])
app.include_router(steps.router, prefix="/api/onboarding", tags=["Onboarding Steps"])
app.include_router(changes.router, prefix="/api/changes", tags=["Changes"])


@app.get("/")
async def root():
    return {
        "message": "Welcome to Devonboard Sync - documentation to onboarding sync",
        "version": __version__,
        "endpoints": {
            "webhook": "/api/webhook/github",
            "sources": "/api/sources",
            "steps": "/api/onboarding/{plan_id}/steps",
            "changes": "/api/changes",
            "health": "/health",
            "docs": "/docs",
            "redoc": "/redoc",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}
