"""
CORS for the browser clients.

The POS terminal, the customer QR menu and FlowTrak are separate web
apps, so each origin must be listed. ``ALLOWED_ORIGINS`` (comma
separated) replaces the local development list.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings

DEV_PORTS = (3000, 3001, 5173)
DEV_ORIGINS = [
    f"http://{host}:{port}" for host in ("localhost", "127.0.0.1") for port in DEV_PORTS
]


def get_cors_origins() -> list[str]:
    configured = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    return configured or DEV_ORIGINS


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept-Language", "X-Request-ID"],
        # QR PDFs are downloaded by name
        expose_headers=["X-Request-ID", "Content-Disposition"],
        max_age=0 if settings.environment == "development" else 600,
    )
