"""GitHub REST API client used by the demo plugin.

The client exposes only the endpoints the permission resolver and the
action catalogue call. Two instances are built per invocation: one with the
installation token forwarded by the kernel and one with the end user's own
token.
"""

from __future__ import annotations

import dataclasses
import typing as typ
import urllib.parse

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import (
    CollaboratorPermission,
    GitCommit,
    GitHubUser,
    GitRef,
    IssueComment,
    Label,
    MergeResult,
    OrgMembership,
    PullRequest,
    Repository,
)

if typ.TYPE_CHECKING:
    import types

    from ubiquity_demo.models import IssueRef, RepositoryRef

_T = typ.TypeVar("_T")

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_API_URL = "https://api.github.com"
_API_VERSION = "2022-11-28"


class GitHubRepositoryClient(typ.Protocol):
    """Interface for the GitHub operations the plugin performs."""

    async def get_authenticated_user(self) -> GitHubUser:
        """Return the account the client authenticates as."""
        ...

    async def get_org_membership(self, org: str, username: str) -> OrgMembership:
        """Return ``username``'s membership of ``org``."""
        ...

    async def get_collaborator_permission(
        self, repo: RepositoryRef, username: str
    ) -> CollaboratorPermission:
        """Return ``username``'s permission level on ``repo``."""
        ...

    async def remove_all_labels(self, issue: IssueRef) -> None:
        """Remove every label from ``issue``."""
        ...

    async def add_labels(
        self, issue: IssueRef, labels: typ.Sequence[str]
    ) -> list[Label]:
        """Add ``labels`` to ``issue``."""
        ...

    async def update_issue_state(self, issue: IssueRef, state: str) -> None:
        """Set the state of ``issue`` to ``open`` or ``closed``."""
        ...

    async def create_issue_comment(self, issue: IssueRef, body: str) -> IssueComment:
        """Append a comment to ``issue``."""
        ...

    async def create_fork(self, repo: RepositoryRef, *, name: str) -> Repository:
        """Fork ``repo`` into the authenticated account as ``name``."""
        ...

    async def get_repository(self, repo: RepositoryRef) -> Repository:
        """Return repository metadata."""
        ...

    async def get_ref(self, repo: RepositoryRef, ref: str) -> GitRef:
        """Return a git reference such as ``heads/main``."""
        ...

    async def create_ref(self, repo: RepositoryRef, ref: str, sha: str) -> GitRef:
        """Create a fully-qualified git reference pointing at ``sha``."""
        ...

    async def get_commit(self, repo: RepositoryRef, sha: str) -> GitCommit:
        """Return a git commit object."""
        ...

    async def create_commit(
        self,
        repo: RepositoryRef,
        *,
        message: str,
        tree: str,
        parents: typ.Sequence[str],
    ) -> GitCommit:
        """Create a git commit object."""
        ...

    async def update_ref(self, repo: RepositoryRef, ref: str, sha: str) -> GitRef:
        """Move an existing git reference to ``sha``."""
        ...

    async def create_pull_request(
        self,
        repo: RepositoryRef,
        *,
        head: str,
        base: str,
        title: str,
        body: str,
    ) -> PullRequest:
        """Open a pull request against ``repo``."""
        ...

    async def merge_pull_request(
        self, repo: RepositoryRef, number: int
    ) -> MergeResult:
        """Merge pull request ``number`` of ``repo``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "ubiquity-os-demo/0.1"


def _quote(segment: str | int) -> str:
    return urllib.parse.quote(str(segment), safe="")


def _repo_path(repo: RepositoryRef) -> str:
    return f"/repos/{_quote(repo.owner)}/{_quote(repo.name)}"


def _issue_path(issue: IssueRef) -> str:
    return f"{_repo_path(issue.repository)}/issues/{issue.number}"


def _ref_path(ref: str) -> str:
    # Git refs keep their slashes, e.g. heads/fix/1234.
    return urllib.parse.quote(ref.removeprefix("refs/"), safe="/")


class GitHubRestClient:
    """``httpx`` implementation of :class:`GitHubRepositoryClient`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration.

        An injected ``http_client`` is left open by :meth:`aclose`; a client
        built here, optionally over ``transport``, is owned and closed.
        """
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._base_url = config.api_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s, transport=transport
        )
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "User-Agent": config.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
        }

    async def __aenter__(self) -> typ.Self:
        """Return the client for use as an async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close owned HTTP resources on context exit."""
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        """Return whether the underlying HTTP client is closed."""
        return self._client.is_closed

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def get_authenticated_user(self) -> GitHubUser:
        """Return the account the token authenticates as."""
        return await self._request_json("GET", "/user", GitHubUser)

    async def get_org_membership(self, org: str, username: str) -> OrgMembership:
        """Return ``username``'s membership of ``org``.

        GitHub answers 404 when the user is not a member or the owner is not
        an organisation; both surface as :class:`GitHubAPIError`.
        """
        path = f"/orgs/{_quote(org)}/memberships/{_quote(username)}"
        return await self._request_json("GET", path, OrgMembership)

    async def get_collaborator_permission(
        self, repo: RepositoryRef, username: str
    ) -> CollaboratorPermission:
        """Return ``username``'s permission level on ``repo``."""
        path = f"{_repo_path(repo)}/collaborators/{_quote(username)}/permission"
        return await self._request_json("GET", path, CollaboratorPermission)

    async def remove_all_labels(self, issue: IssueRef) -> None:
        """Remove every label from ``issue``."""
        await self._request("DELETE", f"{_issue_path(issue)}/labels")

    async def add_labels(
        self, issue: IssueRef, labels: typ.Sequence[str]
    ) -> list[Label]:
        """Add ``labels`` to ``issue`` and return the resulting label set."""
        return await self._request_json(
            "POST",
            f"{_issue_path(issue)}/labels",
            list[Label],
            json={"labels": list(labels)},
        )

    async def update_issue_state(self, issue: IssueRef, state: str) -> None:
        """Set the state of ``issue``."""
        await self._request("PATCH", _issue_path(issue), json={"state": state})

    async def create_issue_comment(self, issue: IssueRef, body: str) -> IssueComment:
        """Append a comment to ``issue``."""
        return await self._request_json(
            "POST",
            f"{_issue_path(issue)}/comments",
            IssueComment,
            json={"body": body},
        )

    async def create_fork(self, repo: RepositoryRef, *, name: str) -> Repository:
        """Request a fork of ``repo``; GitHub provisions it asynchronously."""
        return await self._request_json(
            "POST",
            f"{_repo_path(repo)}/forks",
            Repository,
            json={"name": name},
        )

    async def get_repository(self, repo: RepositoryRef) -> Repository:
        """Return repository metadata."""
        return await self._request_json("GET", _repo_path(repo), Repository)

    async def get_ref(self, repo: RepositoryRef, ref: str) -> GitRef:
        """Return a git reference such as ``heads/main``."""
        path = f"{_repo_path(repo)}/git/ref/{_ref_path(ref)}"
        return await self._request_json("GET", path, GitRef)

    async def create_ref(self, repo: RepositoryRef, ref: str, sha: str) -> GitRef:
        """Create ``ref`` (fully qualified, ``refs/heads/...``) at ``sha``."""
        return await self._request_json(
            "POST",
            f"{_repo_path(repo)}/git/refs",
            GitRef,
            json={"ref": ref, "sha": sha},
        )

    async def get_commit(self, repo: RepositoryRef, sha: str) -> GitCommit:
        """Return a git commit object."""
        path = f"{_repo_path(repo)}/git/commits/{_quote(sha)}"
        return await self._request_json("GET", path, GitCommit)

    async def create_commit(
        self,
        repo: RepositoryRef,
        *,
        message: str,
        tree: str,
        parents: typ.Sequence[str],
    ) -> GitCommit:
        """Create a git commit object."""
        return await self._request_json(
            "POST",
            f"{_repo_path(repo)}/git/commits",
            GitCommit,
            json={"message": message, "tree": tree, "parents": list(parents)},
        )

    async def update_ref(self, repo: RepositoryRef, ref: str, sha: str) -> GitRef:
        """Move ``ref`` (``heads/...``) to ``sha``."""
        path = f"{_repo_path(repo)}/git/refs/{_ref_path(ref)}"
        return await self._request_json("PATCH", path, GitRef, json={"sha": sha})

    async def create_pull_request(
        self,
        repo: RepositoryRef,
        *,
        head: str,
        base: str,
        title: str,
        body: str,
    ) -> PullRequest:
        """Open a pull request against ``repo``."""
        return await self._request_json(
            "POST",
            f"{_repo_path(repo)}/pulls",
            PullRequest,
            json={"head": head, "base": base, "title": title, "body": body},
        )

    async def merge_pull_request(
        self, repo: RepositoryRef, number: int
    ) -> MergeResult:
        """Merge pull request ``number`` of ``repo``."""
        path = f"{_repo_path(repo)}/pulls/{number}/merge"
        return await self._request_json("PUT", path, MergeResult)

    async def _request_json(
        self,
        method: str,
        path: str,
        model: type[_T],
        *,
        json: object | None = None,
    ) -> _T:
        response = await self._request(method, path, json=json)
        try:
            return msgspec.json.decode(response.content, type=model)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise GitHubResponseShapeError.undecodable(path, exc) from exc

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: object | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, f"{self._base_url}{path}", json=json, headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise GitHubAPIError.transport_error(method, path, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(method, path, response.status_code)
        return response
