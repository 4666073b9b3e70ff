"""
FastAPI Application Entry Point.
Initializes the FastAPI app with middleware, CORS, and routes.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.database import engine
from app.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    configure_logging()
    logger.info(f"Starting Chatbox server ({settings.environment})")
    yield
    # Shutdown
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title="Chatbox Server",
    description="Real-time messaging backend: friends, groups and messages",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)


# CORS Middleware
# Note: For WebSocket connections, CORS is handled by Socket.IO itself (via cors_allowed_origins)
cors_origins = settings.get_allowed_origins_list()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health Check Endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "environment": settings.environment,
        }
    )


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check endpoint.
    Verifies database connectivity.
    """
    checks = {
        "database": False,
    }

    try:
        from sqlalchemy import text
        from app.core.database import AsyncSessionLocal

        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.error(f"Readiness check: database unavailable: {type(e).__name__}: {e}")

    all_healthy = all(checks.values())

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "ready" if all_healthy else "not ready",
            "checks": checks,
        }
    )


# Include API routers
from app.api.v1 import users, friends, groups, messages, files

app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)

app.include_router(
    friends.router,
    prefix="/api/v1/friends",
    tags=["Friends"]
)

app.include_router(
    groups.router,
    prefix="/api/v1/groups",
    tags=["Groups"]
)

app.include_router(
    messages.router,
    prefix="/api/v1/messages",
    tags=["Messages"]
)

app.include_router(
    files.router,
    prefix="/api/v1/files",
    tags=["Files"]
)

# Wrap FastAPI with Socket.IO
# Socket.IO handles /socket.io/* and FastAPI handles everything else
from app.core.websocket import connection_manager

# Save reference to FastAPI app (for testing)
fastapi_app = app

# Client connects to: wss://domain/socket.io/?EIO=4&transport=websocket
app = connection_manager.get_asgi_app(fastapi_app)
