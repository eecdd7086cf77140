"""UbiquityOS demo plugin.

Reacts to issue comments and labels to drive the scripted onboarding demo:
permission checks, relabelling, reopening, fork-and-PR creation and canned
comments.
"""

from __future__ import annotations

from .dispatcher import DispatchContext, handle_comment, handle_label
from .errors import AuthorizationDeniedError
from .permissions import PermissionResolver
from .plugin import PluginInputs, decode_plugin_inputs, run_plugin

__all__ = [
    "AuthorizationDeniedError",
    "DispatchContext",
    "PermissionResolver",
    "PluginInputs",
    "decode_plugin_inputs",
    "handle_comment",
    "handle_label",
    "run_plugin",
]
