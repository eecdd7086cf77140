"""Probe resources for the plugin runtime.

Both probes are stateless: they never call GitHub and are registered even
when the dispatch endpoint is disabled.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe.

    Reports ``ready`` when the dispatch endpoint is mounted and ``probes-only``
    otherwise, always with HTTP 200.
    """

    def __init__(self, *, dispatch_enabled: bool = False) -> None:
        """Record whether the kernel dispatch endpoint is mounted."""
        self._dispatch_enabled = dispatch_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready" if self._dispatch_enabled else "probes-only"}
        resp.status = HTTPStatus.OK
