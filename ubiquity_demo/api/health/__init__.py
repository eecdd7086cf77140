"""Liveness and readiness probes for the plugin runtime.

Usage
-----
Import probe resources for route registration::

    from ubiquity_demo.api.health.resources import HealthResource, ReadyResource
"""
