"""
HTTP hardening for the API: response headers and request body types.
"""

import json

from fastapi import FastAPI
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shared.config.settings import settings
from shared.i18n import resolve_locale, translate

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # Kiosk QR pages open the camera; the API itself never needs it.
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}
HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware:
    """
    Adds BASE_HEADERS to every HTTP response.

    JSON under /api is marked ``Cache-Control: no-store`` (bills, users
    and logs must not sit in shared caches); uploaded images under
    /uploads stay cacheable.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        no_store = scope["path"].startswith("/api/")

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in BASE_HEADERS.items():
                    headers[name] = value
                if no_store and "cache-control" not in headers:
                    headers["Cache-Control"] = "no-store"
                if settings.environment == "production":
                    headers["Strict-Transport-Security"] = HSTS
                if "server" in headers:
                    del headers["server"]
            await send(message)

        await self.app(scope, receive, send_with_headers)


class ContentTypeValidationMiddleware:
    """
    Rejects request bodies the API cannot read with 415.

    JSON is accepted everywhere. Multipart is accepted too since image
    uploads and comment attachments arrive as form data.
    """

    METHODS_WITH_BODY = {"POST", "PUT", "PATCH"}
    ALLOWED_TYPES = (
        "application/json",
        "application/x-www-form-urlencoded",
        "multipart/form-data",
    )

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] in self.METHODS_WITH_BODY:
            headers = Headers(scope=scope)
            content_type = headers.get("content-type", "")
            if content_type and not content_type.startswith(self.ALLOWED_TYPES):
                locale = resolve_locale(headers.get("accept-language"))
                await self._reject(send, translate("errors.unsupported_media_type", locale))
                return
        await self.app(scope, receive, send)

    @staticmethod
    async def _reject(send: Send, detail: str) -> None:
        body = json.dumps({"detail": detail}, ensure_ascii=False).encode("utf-8")
        await send({
            "type": "http.response.start",
            "status": 415,
            "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
            ],
        })
        await send({"type": "http.response.body", "body": body})


def register_middlewares(app: FastAPI) -> None:
    """Content-type check runs first, security headers wrap every response."""
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ContentTypeValidationMiddleware)
