"""Demo plugin runtime entrypoint for HTTP deployments.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`ubiquity_demo.api.app.create_app` and keeps the
``ubiquity_demo.runtime:create_app`` entrypoint stable.

When ``UBQ_DEMO_USER_TOKEN`` is set the runtime mounts the kernel dispatch
endpoint; otherwise it starts with probes only.

Configuration is driven by environment variables:

- ``UBQ_DEMO_HOST``: Bind address (default ``0.0.0.0``)
- ``UBQ_DEMO_PORT``: Listen port (default ``8080``)
- ``UBQ_DEMO_LOG_LEVEL``: Log level (default ``INFO``)
- ``UBQ_DEMO_USER_TOKEN``: End-user GitHub token (enables dispatch)

Run the service directly with ``python -m ubiquity_demo.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from ubiquity_demo.config import USER_TOKEN_ENV, PluginConfig
from ubiquity_demo.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid UBQ_DEMO_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment."""
    from ubiquity_demo.api.app import create_app as _create_api_app

    if not os.environ.get(USER_TOKEN_ENV, "").strip():
        log_warning(logger, "%s is not set; serving probes only", USER_TOKEN_ENV)
        return _create_api_app()

    from ubiquity_demo.api.plugin.resources import PluginResourceDependencies

    return _create_api_app(PluginResourceDependencies(config=PluginConfig.from_env()))


def main() -> None:
    """Start the plugin runtime server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("UBQ_DEMO_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("UBQ_DEMO_PORT", "8080"))
    log_level_str = os.environ.get("UBQ_DEMO_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid UBQ_DEMO_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting demo plugin runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "ubiquity_demo.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
