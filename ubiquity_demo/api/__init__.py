"""Demo plugin HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application through which the kernel delivers events to the plugin.

Usage
-----
Create and run the application::

    from ubiquity_demo.api import create_app

    app = create_app()              # probes only
    app = create_app(dependencies)  # probes plus the dispatch endpoint

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with probe
    endpoints and, when plugin configuration is available, the kernel
    dispatch endpoint.
"""

from ubiquity_demo.api.app import create_app

__all__ = ["create_app"]
