"""API route registration."""

from fastapi import APIRouter, FastAPI

from switchyard.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from switchyard.api.routes.wiring import router as wiring_router

    router.include_router(wiring_router, tags=["Wiring"])

    logger.debug("v1_router_created", routes=["wiring"])

    return router


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    v1_router = create_v1_router()
    app.include_router(v1_router)

    # Health routes at root level
    from switchyard.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")
