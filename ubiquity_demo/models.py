"""Request-scoped domain models for the demo plugin.

Every value here is built from a single inbound event and discarded once the
event has been dispatched.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ


@dataclasses.dataclass(frozen=True, slots=True)
class Actor:
    """User whose action triggered the event."""

    username: str


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoryRef:
    """GitHub repository identified by owner and name."""

    owner: str
    name: str

    @property
    def slug(self) -> str:
        """Return the GitHub-style owner/name identifier."""
        return f"{self.owner}/{self.name}"


@dataclasses.dataclass(frozen=True, slots=True)
class IssueRef:
    """Issue or pull request thread within a repository."""

    repository: RepositoryRef
    number: int


class PermissionBasis(enum.StrEnum):
    """Reason an actor was (or was not) granted administrative authority."""

    OWNER = "owner"
    ORG_MEMBER = "org_member"
    COLLABORATOR_ADMIN = "collaborator_admin"
    DENIED = "denied"


@dataclasses.dataclass(frozen=True, slots=True)
class PermissionDecision:
    """Outcome of a single permission resolution."""

    is_authorized: bool
    basis: PermissionBasis

    @classmethod
    def denied(cls) -> PermissionDecision:
        """Return the fail-closed decision."""
        return cls(is_authorized=False, basis=PermissionBasis.DENIED)


@dataclasses.dataclass(frozen=True, slots=True)
class CommentCreatedOrEdited:
    """An ``issue_comment`` created or edited event."""

    actor: Actor
    issue: IssueRef
    body: str

    @property
    def repository(self) -> RepositoryRef:
        """Return the repository the comment was posted in."""
        return self.issue.repository


@dataclasses.dataclass(frozen=True, slots=True)
class IssueLabeled:
    """An ``issues.labeled`` event.

    ``label`` is ``None`` when GitHub omits the label from the payload.
    """

    actor: Actor
    issue: IssueRef
    label: str | None

    @property
    def repository(self) -> RepositoryRef:
        """Return the repository of the labelled issue."""
        return self.issue.repository


CommandEvent: typ.TypeAlias = CommentCreatedOrEdited | IssueLabeled


__all__ = [
    "Actor",
    "CommandEvent",
    "CommentCreatedOrEdited",
    "IssueLabeled",
    "IssueRef",
    "PermissionBasis",
    "PermissionDecision",
    "RepositoryRef",
]
