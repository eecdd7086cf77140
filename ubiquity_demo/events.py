"""Decode GitHub webhook payloads into demo command events.

Only the fields the dispatcher reads are declared; everything else in the
webhook body is ignored by msgspec.
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec

from ubiquity_demo.errors import InvalidPluginInputError
from ubiquity_demo.models import (
    Actor,
    CommentCreatedOrEdited,
    IssueLabeled,
    IssueRef,
    RepositoryRef,
)

if typ.TYPE_CHECKING:
    from ubiquity_demo.models import CommandEvent

__all__ = [
    "SupportedEvent",
    "event_from_payload",
]


class SupportedEvent(enum.StrEnum):
    """Kernel event names the plugin subscribes to."""

    ISSUE_COMMENT_CREATED = "issue_comment.created"
    ISSUE_COMMENT_EDITED = "issue_comment.edited"
    ISSUES_LABELED = "issues.labeled"


class _User(msgspec.Struct, kw_only=True):
    login: str


class _Repository(msgspec.Struct, kw_only=True):
    name: str
    owner: _User


class _Issue(msgspec.Struct, kw_only=True):
    number: int


class _Comment(msgspec.Struct, kw_only=True):
    body: str | None = None


class _Label(msgspec.Struct, kw_only=True):
    name: str


class _IssueCommentPayload(msgspec.Struct, kw_only=True):
    sender: _User
    repository: _Repository
    issue: _Issue
    comment: _Comment


class _IssuesLabeledPayload(msgspec.Struct, kw_only=True):
    sender: _User
    repository: _Repository
    issue: _Issue
    label: _Label | None = None


_PAYLOAD_TYPES: dict[SupportedEvent, type[msgspec.Struct]] = {
    SupportedEvent.ISSUE_COMMENT_CREATED: _IssueCommentPayload,
    SupportedEvent.ISSUE_COMMENT_EDITED: _IssueCommentPayload,
    SupportedEvent.ISSUES_LABELED: _IssuesLabeledPayload,
}


def _issue_ref(repository: _Repository, issue: _Issue) -> IssueRef:
    return IssueRef(
        repository=RepositoryRef(owner=repository.owner.login, name=repository.name),
        number=issue.number,
    )


def event_from_payload(
    event_name: SupportedEvent, payload: dict[str, typ.Any]
) -> CommandEvent:
    """Build the command event for a webhook payload.

    Parameters
    ----------
    event_name
        Kernel event name, e.g. ``issue_comment.created``.
    payload
        Decoded webhook JSON body.

    Raises
    ------
    InvalidPluginInputError
        If the payload lacks the sender, repository, issue or comment.

    """
    try:
        decoded = msgspec.convert(payload, type=_PAYLOAD_TYPES[event_name])
    except msgspec.ValidationError as exc:
        raise InvalidPluginInputError(str(exc), field="eventPayload") from exc

    if isinstance(decoded, _IssueCommentPayload):
        return CommentCreatedOrEdited(
            actor=Actor(username=decoded.sender.login),
            issue=_issue_ref(decoded.repository, decoded.issue),
            body=decoded.comment.body or "",
        )
    labeled = typ.cast("_IssuesLabeledPayload", decoded)
    return IssueLabeled(
        actor=Actor(username=labeled.sender.login),
        issue=_issue_ref(labeled.repository, labeled.issue),
        label=labeled.label.name if labeled.label is not None else None,
    )
