"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pushhub.api import auth, clients, domains, health, notifications, subscribe
from pushhub.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    if not settings.push_configured:
        logger.warning("VAPID keys are not set; sending notifications is disabled")
    yield


app = FastAPI(
    title="PushHub API",
    description="Multi-tenant web push notification management",
    version="0.1.0",
    lifespan=lifespan,
)

# Admin UI origin; in development also allow the usual local dev servers
allowed_origins = [settings.frontend_url]
if settings.is_development:
    allowed_origins += ["http://localhost:3000", "http://localhost:3001"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(dict.fromkeys(allowed_origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(domains.router)
app.include_router(notifications.router)
app.include_router(subscribe.router)
