"""
REST API main application.
Entry point for the FastAPI REST server: restaurant POS under /api and
FlowTrak work tracking under /api/flow.
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from mooprompt_api.core.cors import configure_cors
from mooprompt_api.core.exception_handlers import register_exception_handlers
from mooprompt_api.core.lifespan import lifespan
from mooprompt_api.core.middlewares import register_middlewares
from mooprompt_api.routers.auth import router as auth_router
from mooprompt_api.routers.flow import router as flow_router
from mooprompt_api.routers.pos import routers as pos_routers
from mooprompt_api.routers.public import health_router
from mooprompt_api.services.storage import RESTAURANT_DIR, upload_root
from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware
from shared.security.rate_limit import limiter


app = FastAPI(
    title="MooPrompt API",
    description="Restaurant POS and FlowTrak work tracking API",
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
# Uploaded images (public)
# =============================================================================

restaurant_images = upload_root() / RESTAURANT_DIR
Path(restaurant_images).mkdir(parents=True, exist_ok=True)
app.mount(
    f"/uploads/{RESTAURANT_DIR}",
    StaticFiles(directory=restaurant_images),
    name="restaurant-uploads",
)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(auth_router)
for pos_router in pos_routers:
    app.include_router(pos_router)
app.include_router(flow_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mooprompt_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
