"""Application factory for the demo plugin Falcon ASGI application.

Usage
-----
Create a probes-only app (no GitHub credentials)::

    app = create_app()

Create the full app with the kernel dispatch endpoint::

    from ubiquity_demo.api.app import create_app
    from ubiquity_demo.api.plugin.resources import PluginResourceDependencies

    app = create_app(PluginResourceDependencies(config=PluginConfig.from_env()))

"""

from __future__ import annotations

import typing as typ

import falcon.asgi

from ubiquity_demo.api.errors import (
    handle_authorization_denied,
    handle_github_error,
    handle_invalid_input,
)
from ubiquity_demo.api.health.resources import HealthResource, ReadyResource
from ubiquity_demo.errors import AuthorizationDeniedError, InvalidPluginInputError
from ubiquity_demo.github import GitHubAPIError, GitHubResponseShapeError

if typ.TYPE_CHECKING:
    from ubiquity_demo.api.plugin.resources import PluginResourceDependencies

__all__ = ["create_app"]


def create_app(
    dependencies: PluginResourceDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    ``/health`` and ``/ready`` are always registered. ``POST /`` is only
    registered when *dependencies* is provided.

    Parameters
    ----------
    dependencies
        Optional dispatch dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    app = falcon.asgi.App()

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(dispatch_enabled=dependencies is not None))

    if dependencies is not None:
        from ubiquity_demo.api.plugin.resources import PluginResource

        app.add_route("/", PluginResource(dependencies))

    app.add_error_handler(AuthorizationDeniedError, handle_authorization_denied)
    app.add_error_handler(InvalidPluginInputError, handle_invalid_input)
    app.add_error_handler(GitHubAPIError, handle_github_error)
    app.add_error_handler(GitHubResponseShapeError, handle_github_error)

    return app
