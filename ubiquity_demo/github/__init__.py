"""GitHub REST client and response models."""

from __future__ import annotations

from .client import GitHubRepositoryClient, GitHubRestClient, GitHubRestConfig
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import (
    CollaboratorPermission,
    GitCommit,
    GitHubUser,
    GitRef,
    IssueComment,
    MergeResult,
    OrgMembership,
    PullRequest,
    Repository,
)

__all__ = [
    "CollaboratorPermission",
    "GitCommit",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubRepositoryClient",
    "GitHubResponseShapeError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "GitHubUser",
    "GitRef",
    "IssueComment",
    "MergeResult",
    "OrgMembership",
    "PullRequest",
    "Repository",
]
