"""Typed GitHub REST response models.

Only the fields the plugin reads are declared; msgspec ignores the rest of
each payload.
"""

from __future__ import annotations

import msgspec


class GitHubUser(msgspec.Struct, kw_only=True, frozen=True):
    """Authenticated or referenced GitHub account."""

    login: str


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository metadata returned by ``GET /repos/{owner}/{repo}``."""

    name: str
    full_name: str
    default_branch: str
    html_url: str | None = None


class GitObject(msgspec.Struct, kw_only=True, frozen=True):
    """Object pointed at by a git reference."""

    sha: str
    type: str = "commit"


class GitRef(msgspec.Struct, kw_only=True, frozen=True):
    """Git reference such as ``refs/heads/main``."""

    ref: str
    object: GitObject


class GitTree(msgspec.Struct, kw_only=True, frozen=True):
    """Tree reference embedded in a git commit."""

    sha: str


class GitCommit(msgspec.Struct, kw_only=True, frozen=True):
    """Git commit object from the Git Database API."""

    sha: str
    tree: GitTree
    message: str = ""


class PullRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request created or merged by the plugin."""

    number: int
    html_url: str | None = None
    title: str = ""


class MergeResult(msgspec.Struct, kw_only=True, frozen=True):
    """Response of ``PUT /repos/{owner}/{repo}/pulls/{number}/merge``."""

    merged: bool
    sha: str | None = None
    message: str = ""


class UserPermissions(msgspec.Struct, kw_only=True, frozen=True):
    """Per-repository permission flags for a collaborator."""

    admin: bool = False
    maintain: bool = False
    push: bool = False
    triage: bool = False
    pull: bool = False


class CollaboratorUser(msgspec.Struct, kw_only=True, frozen=True):
    """Collaborator as embedded in a permission-level response."""

    login: str
    permissions: UserPermissions | None = None


class CollaboratorPermission(msgspec.Struct, kw_only=True, frozen=True):
    """Response of the collaborator permission-level endpoint."""

    permission: str
    role_name: str | None = None
    user: CollaboratorUser | None = None

    @property
    def is_admin(self) -> bool:
        """Return the admin flag, treating a missing user block as ``False``."""
        if self.user is None or self.user.permissions is None:
            return False
        return self.user.permissions.admin


class OrgMembership(msgspec.Struct, kw_only=True, frozen=True):
    """Organisation membership of a user."""

    state: str
    role: str


class IssueComment(msgspec.Struct, kw_only=True, frozen=True):
    """Issue comment created by the plugin."""

    id: int
    body: str = ""
    html_url: str | None = None


class Label(msgspec.Struct, kw_only=True, frozen=True):
    """Issue label."""

    name: str
