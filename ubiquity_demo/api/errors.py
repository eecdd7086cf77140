"""Falcon error handlers for plugin failures.

Usage
-----
Register error handlers on the Falcon app::

    app.add_error_handler(AuthorizationDeniedError, handle_authorization_denied)
    app.add_error_handler(InvalidPluginInputError, handle_invalid_input)
    app.add_error_handler(GitHubAPIError, handle_github_error)
    app.add_error_handler(GitHubResponseShapeError, handle_github_error)

"""

from __future__ import annotations

import typing as typ

import falcon

from ubiquity_demo.logging import get_logger, log_exception

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from ubiquity_demo.errors import AuthorizationDeniedError, InvalidPluginInputError
    from ubiquity_demo.github import GitHubAPIError, GitHubResponseShapeError

__all__ = [
    "handle_authorization_denied",
    "handle_github_error",
    "handle_invalid_input",
]

logger = get_logger(__name__)


async def handle_authorization_denied(
    _req: Request,
    resp: Response,
    ex: AuthorizationDeniedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthorizationDeniedError`` to an HTTP 403 JSON response.

    The description is the user-facing refusal message.
    """
    resp.status = falcon.HTTP_403
    resp.media = {
        "title": "Authorization denied",
        "description": ex.message,
        "user": ex.username,
    }


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidPluginInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidPluginInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid plugin input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_github_error(
    _req: Request,
    resp: Response,
    ex: GitHubAPIError | GitHubResponseShapeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map GitHub failures to an HTTP 502 JSON response.

    Actions already applied before the failure are not rolled back.
    """
    log_exception(logger, f"GitHub call failed: {ex}", ex)
    resp.status = falcon.HTTP_502
    media: dict[str, object] = {
        "title": "GitHub request failed",
        "description": str(ex),
    }
    status_code = getattr(ex, "status_code", None)
    if status_code is not None:
        media["upstream_status"] = status_code
    resp.media = media
