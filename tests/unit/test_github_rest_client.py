"""Unit tests for the GitHub REST client."""

from __future__ import annotations

import json
import secrets
import typing as typ

import httpx
import pytest

from ubiquity_demo.github import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
    GitHubRestClient,
    GitHubRestConfig,
)
from ubiquity_demo.models import IssueRef, RepositoryRef

_TOKEN = secrets.token_hex(8)
_REPO = RepositoryRef(owner="0x4007", name="ubiquity-os-demo-x")
_ISSUE = IssueRef(repository=_REPO, number=3)


class _Recorded(typ.NamedTuple):
    method: str
    path: str
    body: object | None
    headers: httpx.Headers


def _make_client(
    responses: list[tuple[int, object]],
) -> tuple[GitHubRestClient, list[_Recorded]]:
    calls: list[_Recorded] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        calls.append(
            _Recorded(request.method, request.url.path, body, request.headers)
        )
        status, payload = responses[len(calls) - 1]
        if payload is None:
            return httpx.Response(status_code=status)
        return httpx.Response(status_code=status, json=payload)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    client = GitHubRestClient(
        GitHubRestConfig(token=_TOKEN, api_url="https://example.test/api/v3/"),
        http_client=http_client,
    )
    return client, calls


@pytest.mark.asyncio
async def test_requests_carry_auth_and_api_headers() -> None:
    """Every request is authenticated and pinned to the REST API version."""
    client, calls = _make_client([(200, {"login": "demo-bot", "id": 5})])

    user = await client.get_authenticated_user()

    assert user.login == "demo-bot"
    assert calls[0].path == "/api/v3/user"
    headers = calls[0].headers
    assert headers["authorization"] == f"Bearer {_TOKEN}"
    assert headers["accept"] == "application/vnd.github+json"
    assert headers["x-github-api-version"] == "2022-11-28"


@pytest.mark.asyncio
async def test_collaborator_permission_decodes_admin_flag() -> None:
    """The admin flag is read from the embedded user permissions."""
    client, calls = _make_client(
        [
            (
                200,
                {
                    "permission": "admin",
                    "role_name": "admin",
                    "user": {
                        "login": "maintainer",
                        "permissions": {"admin": True, "push": True, "pull": True},
                    },
                },
            )
        ]
    )

    permission = await client.get_collaborator_permission(_REPO, "maintainer")

    assert permission.is_admin is True
    assert calls[0].path == (
        "/api/v3/repos/0x4007/ubiquity-os-demo-x/collaborators/maintainer/permission"
    )


@pytest.mark.asyncio
async def test_collaborator_permission_without_user_block_is_not_admin() -> None:
    """A response without permission flags reads as non-admin."""
    client, _ = _make_client([(200, {"permission": "read"})])

    permission = await client.get_collaborator_permission(_REPO, "reader")

    assert permission.is_admin is False


@pytest.mark.asyncio
async def test_org_membership_404_raises_api_error_with_status() -> None:
    """Non-members surface as GitHubAPIError carrying the status code."""
    client, calls = _make_client([(404, {"message": "Not Found"})])

    with pytest.raises(GitHubAPIError) as excinfo:
        await client.get_org_membership("0x4007", "stranger")

    assert excinfo.value.status_code == 404
    assert calls[0].path == "/api/v3/orgs/0x4007/memberships/stranger"


@pytest.mark.asyncio
async def test_label_endpoints_use_issue_paths() -> None:
    """Labels are removed with DELETE and added with a labels body."""
    client, calls = _make_client(
        [
            (204, None),
            (200, [{"name": "Priority: 1 (Normal)"}, {"name": "Time: <1 Hour"}]),
        ]
    )

    await client.remove_all_labels(_ISSUE)
    labels = await client.add_labels(
        _ISSUE, ("Priority: 1 (Normal)", "Time: <1 Hour")
    )

    assert [(call.method, call.path) for call in calls] == [
        ("DELETE", "/api/v3/repos/0x4007/ubiquity-os-demo-x/issues/3/labels"),
        ("POST", "/api/v3/repos/0x4007/ubiquity-os-demo-x/issues/3/labels"),
    ]
    assert calls[1].body == {"labels": ["Priority: 1 (Normal)", "Time: <1 Hour"]}
    assert [label.name for label in labels] == [
        "Priority: 1 (Normal)",
        "Time: <1 Hour",
    ]


@pytest.mark.asyncio
async def test_update_issue_state_patches_issue() -> None:
    """Reopening sends a PATCH with the new state."""
    client, calls = _make_client([(200, {"number": 3, "state": "open"})])

    await client.update_issue_state(_ISSUE, "open")

    assert calls[0].method == "PATCH"
    assert calls[0].body == {"state": "open"}


@pytest.mark.asyncio
async def test_git_ref_paths_keep_branch_slashes() -> None:
    """Branch names containing slashes are not percent-encoded."""
    ref = {"ref": "refs/heads/fix/abc", "object": {"sha": "s1", "type": "commit"}}
    client, calls = _make_client([(200, ref), (200, ref)])
    fork = RepositoryRef(owner="demo-bot", name="ubiquity-os-demo-x-0x4007")

    await client.get_ref(fork, "heads/fix/abc")
    updated = await client.update_ref(fork, "heads/fix/abc", "s2")

    assert calls[0].path.endswith("/git/ref/heads/fix/abc")
    assert calls[1].method == "PATCH"
    assert calls[1].path.endswith("/git/refs/heads/fix/abc")
    assert calls[1].body == {"sha": "s2"}
    assert updated.object.sha == "s1"


@pytest.mark.asyncio
async def test_fork_and_pull_request_bodies() -> None:
    """Fork, commit and pull request calls send the documented bodies."""
    client, calls = _make_client(
        [
            (
                202,
                {
                    "name": "ubiquity-os-demo-x-0x4007",
                    "full_name": "demo-bot/ubiquity-os-demo-x-0x4007",
                    "default_branch": "development",
                },
            ),
            (201, {"sha": "c2", "tree": {"sha": "t1"}, "message": "chore"}),
            (201, {"number": 12, "html_url": "https://github.com/x/y/pull/12"}),
            (200, {"merged": True, "sha": "m1", "message": "merged"}),
        ]
    )

    fork = await client.create_fork(_REPO, name="ubiquity-os-demo-x-0x4007")
    commit = await client.create_commit(
        _REPO, message="chore: empty commit", tree="t1", parents=["c1"]
    )
    pull_request = await client.create_pull_request(
        _REPO,
        head="demo-bot:fix/abc",
        base="development",
        title="fix/abc",
        body="Resolves #3",
    )
    merge = await client.merge_pull_request(_REPO, pull_request.number)

    assert fork.default_branch == "development"
    assert calls[0].body == {"name": "ubiquity-os-demo-x-0x4007"}
    assert commit.sha == "c2"
    assert calls[1].body == {
        "message": "chore: empty commit",
        "tree": "t1",
        "parents": ["c1"],
    }
    assert calls[2].body == {
        "head": "demo-bot:fix/abc",
        "base": "development",
        "title": "fix/abc",
        "body": "Resolves #3",
    }
    assert (calls[3].method, calls[3].path) == (
        "PUT",
        "/api/v3/repos/0x4007/ubiquity-os-demo-x/pulls/12/merge",
    )
    assert merge.merged is True


@pytest.mark.asyncio
async def test_unexpected_shape_raises_response_shape_error() -> None:
    """Bodies that do not match the model raise GitHubResponseShapeError."""
    client, _ = _make_client([(200, {"name": "demo"})])

    with pytest.raises(GitHubResponseShapeError):
        await client.get_repository(_REPO)


@pytest.mark.asyncio
async def test_transport_failure_raises_api_error() -> None:
    """Network failures are wrapped as GitHubAPIError without a status."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = GitHubRestClient(
        GitHubRestConfig(token=_TOKEN),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
    )

    with pytest.raises(GitHubAPIError) as excinfo:
        await client.get_authenticated_user()

    assert excinfo.value.status_code is None


def test_empty_token_is_rejected() -> None:
    """A blank token cannot build a client."""
    with pytest.raises(GitHubConfigError):
        GitHubRestClient(GitHubRestConfig(token="  "))


@pytest.mark.asyncio
async def test_injected_http_client_is_not_closed() -> None:
    """Only owned HTTP clients are closed on exit."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )

    config = GitHubRestConfig(token=_TOKEN)
    async with GitHubRestClient(config, http_client=http_client):
        pass

    assert http_client.is_closed is False
    await http_client.aclose()


@pytest.mark.asyncio
async def test_client_built_over_transport_is_closed_on_exit() -> None:
    """A client built from a transport owns its HTTP client and closes it."""
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"login": "demo-bot"})
    )

    async with GitHubRestClient(
        GitHubRestConfig(token=_TOKEN), transport=transport
    ) as client:
        user = await client.get_authenticated_user()

    assert user.login == "demo-bot"
    assert client.is_closed is True
