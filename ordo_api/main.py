"""
REST API main application.
Entry point for the Ordo FastAPI server.
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from ordo_api.core.cors import configure_cors
from ordo_api.core.errors import register_exception_handlers
from ordo_api.core.lifespan import lifespan
from ordo_api.core.middlewares import register_middlewares
from ordo_api.routers.auth import router as auth_router
from ordo_api.routers.menu import router as menu_router
from ordo_api.routers.orders import router as orders_router
from ordo_api.routers.public import health_router
from ordo_api.routers.reservations import router as reservations_router
from ordo_api.routers.restaurant import router as restaurant_router
from ordo_shared.config.settings import settings
from ordo_shared.security.rate_limit import limiter, rate_limit_exceeded_handler

app = FastAPI(
    title="Ordo API",
    description="Restaurant ordering and reservations API",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_exception_handlers(app)
register_middlewares(app)
# CORS last so it wraps everything, error responses included
configure_cors(app)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(restaurant_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(reservations_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ordo_api.main:app",
        host="0.0.0.0",
        port=settings.api_port,
        reload=settings.environment == "development",
    )
