from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.exception_handlers import setup_exception_handlers
from core.logging_setup import configure_logging

from user.router import user_router
from tenant.router import tenant_router
from location.router import location_router
from item.router import item_router
import models_bootstrap

configure_logging()

openapi_tags = [
    {
        "name": "Locations",
        "description": "Location hierarchy operations",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title="Boxwise", openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

setup_exception_handlers(app)

app.include_router(user_router, prefix="/api")
app.include_router(tenant_router, prefix="/api")
app.include_router(location_router, prefix="/api")
app.include_router(item_router, prefix="/api")



@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
