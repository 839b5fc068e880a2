"""Path normalization and the shared-secret gate for mutating operations."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import status
from fastapi.responses import PlainTextResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from settings import Settings

logger = logging.getLogger(__name__)

PROTECTED_NAMESPACE = "/op"


def normalize_path(path: str, prefix: Optional[str]) -> str:
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
        if path == "":
            path = "/"
    return path


def check_access(
    path: str, method: str, supplied_key: Optional[str], api_key: str
) -> Optional[PlainTextResponse]:
    """Return a terminal response when a protected path may not proceed."""
    if not path.startswith(PROTECTED_NAMESPACE):
        return None
    if not supplied_key or not api_key or supplied_key != api_key:
        return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)
    if method.upper() != "POST":
        return PlainTextResponse(
            "Method Not Allowed", status_code=status.HTTP_405_METHOD_NOT_ALLOWED
        )
    return None


class AccessGateMiddleware:
    """Strips the optional prefix and enforces the gate before routing."""

    def __init__(self, app: ASGIApp, settings: Settings) -> None:
        self.app = app
        self.prefix = settings.path_prefix
        self.api_key = settings.api_key
        self.api_key_header = settings.api_key_header

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = normalize_path(scope["path"], self.prefix)
        if path != scope["path"]:
            scope = dict(scope)
            scope["path"] = path

        supplied_key = Headers(scope=scope).get(self.api_key_header)
        rejection = check_access(path, scope["method"], supplied_key, self.api_key)
        if rejection is not None:
            logger.warning(
                "Rejected protected request",
                extra={
                    "method": scope["method"],
                    "path": path,
                    "status": rejection.status_code,
                },
            )
            await rejection(scope, receive, send)
            return

        await self.app(scope, receive, send)
