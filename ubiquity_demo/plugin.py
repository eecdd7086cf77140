"""Kernel-facing plugin runner.

The UbiquityOS kernel invokes the plugin with a fixed set of inputs, either
as a ``workflow_dispatch`` (every value a string) or as a JSON request body.
:func:`decode_plugin_inputs` accepts both shapes and :func:`run_plugin` turns
one decoded invocation into a dispatched event.
"""

from __future__ import annotations

import typing as typ

import msgspec

from ubiquity_demo.actions import ActionCatalog, FixedDelayWait
from ubiquity_demo.dispatcher import (
    DispatchContext,
    handle_comment,
    handle_label,
    needs_user_identity,
)
from ubiquity_demo.errors import InvalidPluginInputError
from ubiquity_demo.events import SupportedEvent, event_from_payload
from ubiquity_demo.github import GitHubRestClient
from ubiquity_demo.logging import get_logger, log_debug, log_info
from ubiquity_demo.models import CommentCreatedOrEdited
from ubiquity_demo.permissions import PermissionResolver

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from ubiquity_demo.actions import ProvisioningWait
    from ubiquity_demo.config import PluginConfig
    from ubiquity_demo.github import GitHubRestConfig

__all__ = [
    "PluginInputs",
    "decode_plugin_inputs",
    "run_plugin",
]

logger = get_logger(__name__)

# Inputs the kernel may send as JSON-encoded strings.
_JSON_STRING_FIELDS = ("eventPayload", "settings", "command")


class PluginInputs(msgspec.Struct, kw_only=True, rename="camel"):
    """Inputs forwarded by the kernel for one event.

    Attributes
    ----------
    state_id
        Kernel correlation identifier.
    event_name
        GitHub event and action, e.g. ``issue_comment.created``.
    event_payload
        Webhook body for the event.
    settings
        Plugin settings from the repository configuration.
    auth_token
        Installation token with the kernel's authority.
    ref
        Plugin ref the kernel resolved.
    signature
        Kernel signature; verified upstream.
    command
        Parsed command from the kernel, when one was recognised.

    """

    state_id: str
    event_name: str
    event_payload: dict[str, typ.Any]
    auth_token: str
    settings: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    ref: str = ""
    signature: str = ""
    command: dict[str, typ.Any] | None = None


def _expand_json_strings(raw: cabc.Mapping[str, object]) -> dict[str, object]:
    expanded = dict(raw)
    for field in _JSON_STRING_FIELDS:
        value = expanded.get(field)
        if not isinstance(value, str):
            continue
        if not value.strip():
            expanded.pop(field)
            continue
        try:
            expanded[field] = msgspec.json.decode(value)
        except msgspec.DecodeError as exc:
            raise InvalidPluginInputError(str(exc), field=field) from exc
    return expanded


def decode_plugin_inputs(raw: cabc.Mapping[str, object] | bytes) -> PluginInputs:
    """Decode kernel inputs from a JSON body or a mapping of workflow inputs.

    Raises
    ------
    InvalidPluginInputError
        If the inputs are not valid JSON, miss a required field or carry a
        blank installation token.

    """
    if isinstance(raw, bytes):
        try:
            decoded = msgspec.json.decode(raw)
        except msgspec.DecodeError as exc:
            raise InvalidPluginInputError(str(exc)) from exc
        if not isinstance(decoded, dict):
            msg = "plugin inputs must be a JSON object"
            raise InvalidPluginInputError(msg)
        raw = decoded
    try:
        inputs = msgspec.convert(_expand_json_strings(raw), type=PluginInputs)
    except msgspec.ValidationError as exc:
        raise InvalidPluginInputError(str(exc)) from exc
    if not inputs.auth_token.strip():
        msg = "installation token must be non-empty"
        raise InvalidPluginInputError(msg, field="authToken")
    return inputs


async def run_plugin(
    inputs: PluginInputs,
    config: PluginConfig,
    *,
    provisioning_wait: ProvisioningWait | None = None,
    client_factory: cabc.Callable[[GitHubRestConfig], GitHubRestClient] = (
        GitHubRestClient
    ),
) -> str | None:
    """Dispatch one kernel invocation.

    Returns
    -------
    str | None
        Name of the route that ran, or ``None`` when the event was ignored.

    Raises
    ------
    AuthorizationDeniedError
        If a privileged command was refused.
    InvalidPluginInputError
        If the event payload lacks required fields.
    GitHubAPIError
        If a GitHub mutation fails; earlier steps are not rolled back.

    """
    try:
        event_name = SupportedEvent(inputs.event_name)
    except ValueError:
        log_info(
            logger,
            "Ignoring unsupported event event_name=%s state_id=%s",
            inputs.event_name,
            inputs.state_id,
        )
        return None

    event = event_from_payload(event_name, inputs.event_payload)
    log_debug(
        logger,
        "Received event event_name=%s state_id=%s actor=%s repo=%s issue=%d",
        event_name,
        inputs.state_id,
        event.actor.username,
        event.repository.slug,
        event.issue.number,
    )

    async with (
        client_factory(config.github_config(inputs.auth_token)) as installation,
        client_factory(config.github_config(config.user_token)) as user,
    ):
        user_name: str | None = None
        if needs_user_identity(event):
            authenticated = await user.get_authenticated_user()
            user_name = authenticated.login
        context = DispatchContext(
            user_name=user_name,
            actions=ActionCatalog(
                installation,
                user,
                provisioning_wait=provisioning_wait
                or FixedDelayWait(config.fork_wait_seconds),
            ),
            permissions=PermissionResolver(installation),
            wallet_address=config.wallet_address,
        )
        if isinstance(event, CommentCreatedOrEdited):
            return await handle_comment(event, context)
        return await handle_label(event, context)
