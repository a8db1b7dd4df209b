"""
Tableside REST API main application.
Entry point for the FastAPI server.
"""

from fastapi import FastAPI

from tableside_api.core import (
    configure_cors,
    lifespan,
    register_exception_handlers,
    register_middlewares,
)
from tableside_api.routers.admin import router as admin_router
from tableside_api.routers.auth import router as auth_router
from tableside_api.routers.diner import router as diner_router
from tableside_api.routers.public import health_router, menu_router
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.correlation import CorrelationIdMiddleware
from tableside_shared.security.rate_limit import limiter


app = FastAPI(
    title="Tableside API",
    description="Table-side ordering: menu, customization, cart and orders",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter

register_exception_handlers(app)
register_middlewares(app)
configure_cors(app)
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(menu_router)
app.include_router(diner_router)
app.include_router(admin_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tableside_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
