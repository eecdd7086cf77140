"""Map incoming demo events to actions.

Routing is an explicit ordered table of ``(predicate, handler)`` routes per
event kind. The first route whose predicate matches runs and no other route
is considered, so the table order is the matching contract.

Usage
-----
>>> context = DispatchContext(
...     user_name="demo-bot",
...     actions=ActionCatalog(installation_client, user_client),
...     permissions=PermissionResolver(installation_client),
... )
>>> await handle_comment(event, context)
'demo'

"""

from __future__ import annotations

import dataclasses
import re
import typing as typ

from ubiquity_demo import messages
from ubiquity_demo.config import DEFAULT_WALLET_ADDRESS
from ubiquity_demo.errors import AuthorizationDeniedError
from ubiquity_demo.logging import get_logger, log_error, log_info
from ubiquity_demo.models import CommentCreatedOrEdited

if typ.TYPE_CHECKING:
    from ubiquity_demo.actions import ActionCatalog
    from ubiquity_demo.models import IssueLabeled
    from ubiquity_demo.permissions import PermissionResolver

__all__ = [
    "COMMENT_ROUTES",
    "LABEL_ROUTES",
    "DispatchContext",
    "Route",
    "handle_comment",
    "handle_label",
    "needs_user_identity",
]

logger = get_logger(__name__)

DEMO_COMMAND = "/demo"
START_STOP_MARKER = "ubiquity-os-command-start-stop"
WALLET_MARKER = "ubiquity-os-command-wallet"
PRICE_LABEL_PREFIX = "Price"
DEMO_REPOSITORY_PATTERN = re.compile(r"ubiquity-os-demo\s*")


@dataclasses.dataclass(frozen=True, slots=True)
class DispatchContext:
    """Collaborators available to route handlers for one event.

    Attributes
    ----------
    user_name
        Login of the end-user identity the plugin acts as, or ``None`` when
        the event cannot reach a route that needs it.
    actions
        Action catalogue bound to both GitHub identities.
    permissions
        Resolver consulted by privileged commands.
    wallet_address
        Address registered by the scripted ``/wallet`` comment.

    """

    user_name: str | None
    actions: ActionCatalog
    permissions: PermissionResolver
    wallet_address: str = DEFAULT_WALLET_ADDRESS


_E = typ.TypeVar("_E")


@dataclasses.dataclass(frozen=True, slots=True)
class Route(typ.Generic[_E]):
    """A named predicate and the handler it guards."""

    name: str
    matches: typ.Callable[[_E, DispatchContext], bool]
    handle: typ.Callable[[_E, DispatchContext], typ.Awaitable[None]]


def _is_demo_command(event: CommentCreatedOrEdited, context: DispatchContext) -> bool:
    del context
    return event.body.strip().startswith(DEMO_COMMAND)


async def _run_demo(event: CommentCreatedOrEdited, context: DispatchContext) -> None:
    if not await context.permissions.is_admin(event.actor, event.repository):
        error = AuthorizationDeniedError.demo_command(event.actor.username)
        log_error(logger, "%s user=%s", error.message, event.actor.username)
        raise error
    log_info(logger, "Processing /demo command")
    await context.actions.reopen_issue(event.issue)
    await context.actions.set_demo_labels(event.issue)


def _mentions_marker(
    marker: str,
) -> typ.Callable[[CommentCreatedOrEdited, DispatchContext], bool]:
    # Loose heuristic: any mention of the bot's login anywhere counts.
    def _matches(event: CommentCreatedOrEdited, context: DispatchContext) -> bool:
        return (
            marker in event.body
            and context.user_name is not None
            and context.user_name in event.body
        )

    return _matches


async def _run_start_stop(
    event: CommentCreatedOrEdited, context: DispatchContext
) -> None:
    log_info(logger, "Processing %s post comment", START_STOP_MARKER)
    # Only matched when the login is known.
    user_name = typ.cast("str", context.user_name)
    pull_request = await context.actions.fork_and_open_pull_request(
        event.issue, user_name
    )
    await context.actions.merge_pull_request(event.repository, pull_request.number)


async def _run_wallet(event: CommentCreatedOrEdited, context: DispatchContext) -> None:
    log_info(logger, "Processing %s post comment", WALLET_MARKER)
    await context.actions.post_comment(event.issue, messages.SELF_ASSIGN_EXPLANATION)
    await context.actions.post_comment(event.issue, messages.START_COMMAND)


def _is_demo_pricing(event: IssueLabeled, context: DispatchContext) -> bool:
    del context
    return (
        event.label is not None
        and event.label.startswith(PRICE_LABEL_PREFIX)
        and DEMO_REPOSITORY_PATTERN.search(event.repository.name) is not None
    )


async def _run_pricing_welcome(event: IssueLabeled, context: DispatchContext) -> None:
    log_info(logger, "Handle pricing label set label=%s", event.label)
    await context.actions.post_comment(
        event.issue, messages.welcome(event.repository.owner)
    )
    await context.actions.post_comment(event.issue, messages.WALLET_INTRO)
    await context.actions.post_comment(
        event.issue, messages.wallet_command(context.wallet_address)
    )


COMMENT_ROUTES: tuple[Route[CommentCreatedOrEdited], ...] = (
    Route("demo", _is_demo_command, _run_demo),
    Route("start_stop", _mentions_marker(START_STOP_MARKER), _run_start_stop),
    Route("wallet", _mentions_marker(WALLET_MARKER), _run_wallet),
)

LABEL_ROUTES: tuple[Route[IssueLabeled], ...] = (
    Route("pricing_welcome", _is_demo_pricing, _run_pricing_welcome),
)


def needs_user_identity(event: CommentCreatedOrEdited | IssueLabeled) -> bool:
    """Return whether routing ``event`` may need the end user's login.

    Only the start-stop and wallet routes compare the comment body with the
    login, so every other event is dispatched without looking it up.
    """
    if not isinstance(event, CommentCreatedOrEdited):
        return False
    return START_STOP_MARKER in event.body or WALLET_MARKER in event.body


async def _dispatch(
    routes: typ.Sequence[Route[_E]], event: _E, context: DispatchContext
) -> str | None:
    for route in routes:
        if route.matches(event, context):
            await route.handle(event, context)
            return route.name
    return None


async def handle_comment(
    event: CommentCreatedOrEdited,
    context: DispatchContext,
    *,
    routes: typ.Sequence[Route[CommentCreatedOrEdited]] = COMMENT_ROUTES,
) -> str | None:
    """Dispatch a created or edited comment.

    Returns
    -------
    str | None
        Name of the route that ran, or ``None`` when no route matched.

    Raises
    ------
    AuthorizationDeniedError
        If ``/demo`` is issued by someone who does not administer the
        repository. No mutation has happened when this is raised.

    """
    return await _dispatch(routes, event, context)


async def handle_label(
    event: IssueLabeled,
    context: DispatchContext,
    *,
    routes: typ.Sequence[Route[IssueLabeled]] = LABEL_ROUTES,
) -> str | None:
    """Dispatch an ``issues.labeled`` event; unmatched labels are only logged."""
    route_name = await _dispatch(routes, event, context)
    if route_name is None:
        log_info(
            logger,
            "Ignoring label change label=%s actor=%s repo=%s",
            event.label,
            event.actor.username,
            event.repository.slug,
        )
    return route_name
