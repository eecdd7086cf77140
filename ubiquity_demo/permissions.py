"""Administrative permission resolution for privileged commands.

The resolver walks an ordered tuple of checks. Each check answers ``True`` or
``False`` when it can decide, or ``None`` when it could not determine the
answer and the next check should run. When every check abstains the actor is
denied, so a degraded GitHub API never grants authority.

Usage
-----
>>> resolver = PermissionResolver(installation_client)
>>> await resolver.is_admin(Actor("octocat"), RepositoryRef("ubiquity", "demo"))
True

"""

from __future__ import annotations

import contextlib
import typing as typ

from ubiquity_demo.logging import get_logger, log_debug
from ubiquity_demo.models import PermissionBasis, PermissionDecision

if typ.TYPE_CHECKING:
    from ubiquity_demo.github import GitHubRepositoryClient
    from ubiquity_demo.models import Actor, RepositoryRef

__all__ = [
    "CollaboratorAdminCheck",
    "OrgMembershipCheck",
    "OwnerCheck",
    "PermissionCheck",
    "PermissionResolver",
]

logger = get_logger(__name__)


def _audit(template: str, *args: object) -> None:
    """Emit a debug audit line, ignoring logging failures."""
    with contextlib.suppress(Exception):
        log_debug(logger, template, *args)


class PermissionCheck(typ.Protocol):
    """A single step of the permission cascade."""

    basis: PermissionBasis

    async def check(
        self,
        client: GitHubRepositoryClient,
        actor: Actor,
        repository: RepositoryRef,
    ) -> bool | None:
        """Return a decision, or ``None`` to defer to the next check."""
        ...


class OwnerCheck:
    """Grant authority to the repository owner without any remote call."""

    basis = PermissionBasis.OWNER

    async def check(
        self,
        client: GitHubRepositoryClient,
        actor: Actor,
        repository: RepositoryRef,
    ) -> bool | None:
        """Return ``True`` for the owner and defer otherwise."""
        del client
        if actor.username == repository.owner:
            _audit("%s is the repository owner", actor.username)
            return True
        return None


class OrgMembershipCheck:
    """Grant authority to members of the organisation owning the repository.

    Any membership record counts, whatever its role or state. Failures (not
    a member, owner is a user account, transport errors) defer.
    """

    basis = PermissionBasis.ORG_MEMBER

    async def check(
        self,
        client: GitHubRepositoryClient,
        actor: Actor,
        repository: RepositoryRef,
    ) -> bool | None:
        """Return ``True`` when a membership exists and defer otherwise."""
        try:
            membership = await client.get_org_membership(
                repository.owner, actor.username
            )
        except Exception as exc:  # noqa: BLE001 - any failure defers
            _audit(
                "%s is not a member of %s error=%s",
                actor.username,
                repository.owner,
                exc,
            )
            return None
        _audit(
            "%s is a member of organization %s role=%s state=%s",
            actor.username,
            repository.owner,
            membership.role,
            membership.state,
        )
        return True


class CollaboratorAdminCheck:
    """Decide from the collaborator permission level's admin flag."""

    basis = PermissionBasis.COLLABORATOR_ADMIN

    async def check(
        self,
        client: GitHubRepositoryClient,
        actor: Actor,
        repository: RepositoryRef,
    ) -> bool | None:
        """Return the admin flag, or ``None`` when the lookup fails."""
        try:
            permission = await client.get_collaborator_permission(
                repository, actor.username
            )
        except Exception as exc:  # noqa: BLE001 - any failure defers
            _audit("Failed to check permissions for %s error=%s", actor.username, exc)
            return None
        role = (permission.role_name or "").lower() or None
        _audit(
            "Retrieved collaborator permission level for %s "
            "owner=%s repo=%s is_admin=%s role=%s permission=%s",
            actor.username,
            repository.owner,
            repository.name,
            permission.is_admin,
            role,
            permission.permission,
        )
        return permission.is_admin


_DEFAULT_CHECKS: tuple[PermissionCheck, ...] = (
    OwnerCheck(),
    OrgMembershipCheck(),
    CollaboratorAdminCheck(),
)


class PermissionResolver:
    """Resolve whether an actor administers a repository.

    Every call re-queries GitHub; decisions are never cached.
    """

    def __init__(
        self,
        client: GitHubRepositoryClient,
        *,
        checks: typ.Sequence[PermissionCheck] = _DEFAULT_CHECKS,
    ) -> None:
        """Bind the resolver to the installation-authority client."""
        self._client = client
        self._checks = tuple(checks)

    async def resolve(
        self, actor: Actor, repository: RepositoryRef
    ) -> PermissionDecision:
        """Return the first decisive check's verdict, or a denial."""
        for check in self._checks:
            verdict = await check.check(self._client, actor, repository)
            if verdict is None:
                continue
            if verdict:
                return PermissionDecision(is_authorized=True, basis=check.basis)
            return PermissionDecision.denied()
        return PermissionDecision.denied()

    async def is_admin(self, actor: Actor, repository: RepositoryRef) -> bool:
        """Return ``True`` when ``actor`` may run privileged commands."""
        decision = await self.resolve(actor, repository)
        return decision.is_authorized
