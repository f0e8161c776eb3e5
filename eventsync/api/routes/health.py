"""Health check routes for the FastAPI application."""

from fastapi import APIRouter, Depends

from ... import __version__
from ...change_feed import EVENTS_TOPIC
from ...config.environment import IS_PRODUCTION_ENVIRONMENT
from ..dependencies import ServiceContainer, get_services

router = APIRouter(tags=["health"])


@router.get("/")
def health_check(services: ServiceContainer = Depends(get_services)):
    """Health check endpoint, with the live state of the change feed."""
    return {
        "status": "healthy",
        "environment": "production" if IS_PRODUCTION_ENVIRONMENT else "development",
        "version": __version__,
        "events_revision": services.feed.revision(EVENTS_TOPIC),
        "stream_subscribers": services.feed.subscriber_count(EVENTS_TOPIC),
    }
