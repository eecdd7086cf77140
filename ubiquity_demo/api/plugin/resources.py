"""Kernel dispatch resource.

``POST /`` accepts the kernel's plugin inputs as JSON and dispatches the
contained event.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/", PluginResource(dependencies))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon

from ubiquity_demo.github import GitHubRestClient
from ubiquity_demo.plugin import decode_plugin_inputs, run_plugin

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from ubiquity_demo.actions import ProvisioningWait
    from ubiquity_demo.config import PluginConfig
    from ubiquity_demo.github import GitHubRestConfig

__all__ = ["PluginResource", "PluginResourceDependencies"]


@dc.dataclass(frozen=True, slots=True)
class PluginResourceDependencies:
    """Dependencies for ``PluginResource``.

    Attributes
    ----------
    config
        Plugin configuration (user token, API URL, fork wait).
    provisioning_wait
        Optional override of the fork provisioning strategy.
    client_factory
        Builds a GitHub client for a token.

    """

    config: PluginConfig
    provisioning_wait: ProvisioningWait | None = None
    client_factory: cabc.Callable[[GitHubRestConfig], GitHubRestClient] = (
        GitHubRestClient
    )


class PluginResource:
    """Resource that dispatches one kernel invocation per request."""

    def __init__(self, dependencies: PluginResourceDependencies) -> None:
        """Configure the resource with its dependencies."""
        self._dependencies = dependencies

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST / with the kernel's plugin inputs.

        Responds 200 with the route that ran, or ``"ignored"`` when the event
        matched no route. Authorization, input and GitHub failures are
        translated by the app's error handlers.
        """
        body = await req.stream.read()
        inputs = decode_plugin_inputs(body)
        route = await run_plugin(
            inputs,
            self._dependencies.config,
            provisioning_wait=self._dependencies.provisioning_wait,
            client_factory=self._dependencies.client_factory,
        )
        resp.media = {
            "state_id": inputs.state_id,
            "status": "dispatched" if route is not None else "ignored",
            "route": route,
        }
        resp.status = falcon.HTTP_200
